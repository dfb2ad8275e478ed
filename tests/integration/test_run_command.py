"""Integration tests for `xpanel run` as a real process.

The panel is started with `python -m xpanel` against a store in tmp_path,
then driven with real SIGHUP and SIGTERM signals while its health endpoint
is polled over HTTP.
"""

import json
import os
import signal
import socket
import subprocess
import sys
import time
import urllib.error
import urllib.request
from collections.abc import Iterator
from pathlib import Path

import pytest

from xpanel.adapters.sqlite import SqliteStoreInitializer
from xpanel.domain.settings import WEB_LISTEN

pytestmark = [
    pytest.mark.slow,
    pytest.mark.timeout(60),
    pytest.mark.skipif(not hasattr(signal, "SIGHUP"), reason="POSIX signals required"),
]

REPO_ROOT = Path(__file__).resolve().parents[2]


def free_port() -> int:
    with socket.socket() as s:
        s.bind(("127.0.0.1", 0))
        return s.getsockname()[1]


def configure_store(db_folder: Path, port: int) -> None:
    with SqliteStoreInitializer().init_store(db_folder / "x-ui.db") as store:
        store.settings.set(WEB_LISTEN, "127.0.0.1")
        store.settings.set_port(port)


def health(port: int) -> dict | None:
    try:
        with urllib.request.urlopen(f"http://127.0.0.1:{port}/health", timeout=1) as r:
            return json.loads(r.read())
    except (urllib.error.URLError, ConnectionError, TimeoutError):
        return None


def wait_for_health(port: int, timeout: float = 15.0) -> dict:
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        payload = health(port)
        if payload is not None:
            return payload
        time.sleep(0.1)
    pytest.fail(f"panel did not answer on port {port} within {timeout}s")


def wait_for_exit(process: subprocess.Popen, timeout: float = 15.0) -> int:
    try:
        return process.wait(timeout=timeout)
    except subprocess.TimeoutExpired:
        process.kill()
        pytest.fail("panel did not exit in time")


@pytest.fixture
def db_folder(tmp_path: Path) -> Path:
    return tmp_path / "x-ui"


@pytest.fixture
def launch(db_folder: Path, tmp_path: Path) -> Iterator:
    """Start `python -m xpanel <args>` with the store in db_folder."""
    processes: list[subprocess.Popen] = []

    def start(*args: str) -> subprocess.Popen:
        env = dict(os.environ)
        env["XPANEL_DB_FOLDER"] = str(db_folder)
        env["XDG_CONFIG_HOME"] = str(tmp_path / "config")
        env["PYTHONPATH"] = os.pathsep.join(
            p for p in (str(REPO_ROOT), env.get("PYTHONPATH", "")) if p
        )
        log = (tmp_path / "panel.log").open("wb")
        process = subprocess.Popen(
            [sys.executable, "-m", "xpanel", *args],
            env=env,
            stdout=log,
            stderr=subprocess.STDOUT,
        )
        log.close()
        processes.append(process)
        return process

    yield start

    for process in processes:
        if process.poll() is None:
            process.kill()
            process.wait()


def panel_log(tmp_path: Path) -> str:
    return (tmp_path / "panel.log").read_text(errors="replace")


class TestRunLifecycle:
    """End-to-end lifecycle scenarios."""

    def test_start_then_sigterm_exits_cleanly(
        self, launch, db_folder: Path, tmp_path: Path
    ) -> None:
        port = free_port()
        configure_store(db_folder, port)

        process = launch()
        payload = wait_for_health(port)
        process.send_signal(signal.SIGTERM)

        assert wait_for_exit(process) == 0, panel_log(tmp_path)
        assert payload["status"] == "ok"
        assert health(port) is None
        log = panel_log(tmp_path)
        assert "x-ui" in log
        assert "Service stopped, exiting" in log

    def test_sighup_restarts_with_new_settings(
        self, launch, db_folder: Path, tmp_path: Path
    ) -> None:
        """A port changed while running takes effect on reload."""
        first_port, second_port = free_port(), free_port()
        configure_store(db_folder, first_port)

        process = launch("run")
        wait_for_health(first_port)

        configure_store(db_folder, second_port)
        process.send_signal(signal.SIGHUP)
        wait_for_health(second_port)

        assert health(first_port) is None
        process.send_signal(signal.SIGTERM)
        assert wait_for_exit(process) == 0, panel_log(tmp_path)
        assert "Service restarted" in panel_log(tmp_path)

    def test_port_in_use_exits_without_waiting(
        self, launch, db_folder: Path, tmp_path: Path
    ) -> None:
        with socket.socket() as holder:
            holder.bind(("127.0.0.1", 0))
            holder.listen()
            configure_store(db_folder, holder.getsockname()[1])

            process = launch("run")
            code = wait_for_exit(process)

        assert code == 1
        assert "start service failed" in panel_log(tmp_path)

    def test_failed_restart_exits(self, launch, db_folder: Path, tmp_path: Path) -> None:
        """A reload whose new port is taken ends the process."""
        port = free_port()
        configure_store(db_folder, port)
        process = launch("run")
        wait_for_health(port)

        with socket.socket() as holder:
            holder.bind(("127.0.0.1", 0))
            holder.listen()
            configure_store(db_folder, holder.getsockname()[1])
            process.send_signal(signal.SIGHUP)
            code = wait_for_exit(process)

        assert code == 1
        assert health(port) is None
