"""Unit tests for the process host."""

import signal
import threading
from pathlib import Path
from unittest.mock import Mock, patch

from stateful_worker.host import (
    EXIT_FAILURE,
    EXIT_OK,
    build_parser,
    install_signal_handlers,
    overrides_from_args,
    run_host,
)


class TestArgumentParsing:
    """Test command-line parsing."""

    def test_defaults_produce_no_overrides(self):
        args = build_parser().parse_args([])
        assert overrides_from_args(args) == {"worker": {}, "logging": {}}

    def test_overrides(self):
        args = build_parser().parse_args([
            "--poll-interval", "2", "--job-duration", "0.5",
            "--log-level", "debug", "--json-logs",
        ])

        assert overrides_from_args(args) == {
            "worker": {"poll_interval_seconds": 2.0, "job_duration_seconds": 0.5},
            "logging": {"level": "DEBUG", "format_json": True},
        }


class TestSignalHandlers:
    """Test signal to cancellation mapping."""

    def test_sigterm_requests_stop(self):
        worker = Mock()
        previous = {s: signal.getsignal(s) for s in (signal.SIGINT, signal.SIGTERM)}
        try:
            install_signal_handlers(worker)
            handler = signal.getsignal(signal.SIGTERM)
            handler(signal.SIGTERM, None)
        finally:
            for signum, old in previous.items():
                signal.signal(signum, old)

        worker.request_stop.assert_called_once()

    def test_skipped_off_main_thread(self):
        worker = Mock()
        before = signal.getsignal(signal.SIGTERM)

        thread = threading.Thread(target=install_signal_handlers, args=(worker,))
        thread.start()
        thread.join()

        assert signal.getsignal(signal.SIGTERM) is before


class TestRunHost:
    """Test the host entry point."""

    def test_invalid_config_exits_with_failure(self, tmp_path: Path):
        (tmp_path / "worker.yaml").write_text("worker:\n  history_size: -3\n")

        assert run_host(["--config-dir", str(tmp_path)]) == EXIT_FAILURE

    def test_clean_stop_exits_ok(self, tmp_path: Path):
        created = []

        def fake_install(worker):
            created.append(worker)
            # stand in for a SIGTERM arriving right after start
            worker.request_stop()

        with patch("stateful_worker.host.install_signal_handlers", side_effect=fake_install):
            code = run_host([
                "--config-dir", str(tmp_path),
                "--poll-interval", "0", "--job-duration", "0",
            ])

        assert code == EXIT_OK
        assert created[0].cancel.is_set()
        assert not created[0].is_alive
