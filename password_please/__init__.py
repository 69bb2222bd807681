"""Random Password Please: a small web service that hands out random passwords."""

__version__ = "1.0.0"
