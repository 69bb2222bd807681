import os
import signal
import socket
import subprocess
import sys
import time
from pathlib import Path

import httpx
import pytest

pytestmark = pytest.mark.skipif(sys.platform == "win32", reason="POSIX signals only")

PROJECT_ROOT = Path(__file__).resolve().parent.parent


def _free_port() -> int:
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.bind(("127.0.0.1", 0))
        return sock.getsockname()[1]


def _start_server(tmp_path, counter_path, port):
    env = dict(os.environ)
    env["PYTHONPATH"] = os.pathsep.join(filter(None, [str(PROJECT_ROOT), env.get("PYTHONPATH")]))
    env.pop("COUNTER_FILE", None)
    return subprocess.Popen(
        [sys.executable, "-m", "password_please", "--http", f"127.0.0.1:{port}", "--counter", str(counter_path)],
        cwd=tmp_path,
        env=env,
        stdout=subprocess.PIPE,
        stderr=subprocess.STDOUT,
    )


def _wait_until_ready(proc, base_url, timeout=20.0):
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if proc.poll() is not None:
            pytest.fail(f"server exited early:\n{proc.stdout.read().decode()}")
        try:
            if httpx.get(f"{base_url}/health", timeout=1.0).status_code == 200:
                return
        except httpx.TransportError:
            time.sleep(0.1)
    proc.kill()
    pytest.fail("server did not become ready")


@pytest.mark.parametrize("sig", [signal.SIGTERM, signal.SIGINT])
def test_signal_flushes_counter_and_exits_cleanly(tmp_path, sig):
    counter_path = tmp_path / "counter.txt"
    port = _free_port()
    base_url = f"http://127.0.0.1:{port}"
    proc = _start_server(tmp_path, counter_path, port)
    try:
        _wait_until_ready(proc, base_url)
        with httpx.Client(base_url=base_url) as http:
            for _ in range(57):
                assert http.get("/password.txt").status_code == 200
            assert http.get("/counter").text == "57"
        assert counter_path.read_text() == ""

        proc.send_signal(sig)
        proc.wait(timeout=20)
    finally:
        if proc.poll() is None:
            proc.kill()
            proc.wait()

    output = proc.stdout.read().decode()
    assert proc.returncode == 0, output
    assert counter_path.read_text() == "57"


def test_invalid_counter_file_aborts_startup(tmp_path):
    counter_path = tmp_path / "counter.txt"
    counter_path.write_text("not a number")
    proc = _start_server(tmp_path, counter_path, _free_port())
    try:
        proc.wait(timeout=20)
    finally:
        if proc.poll() is None:
            proc.kill()
            proc.wait()

    assert proc.returncode != 0
    assert counter_path.read_text() == "not a number"
