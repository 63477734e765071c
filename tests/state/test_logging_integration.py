"""Tests for logging emitted by the state machine and phase handlers."""

import threading
from unittest.mock import Mock

from structlog.testing import capture_logs

from stateful_worker.errors import InvalidTransitionError
from stateful_worker.logging.config import configure_logging, get_gating_logger, get_state_logger
from stateful_worker.state.machine import StateMachine, configure_from_table
from stateful_worker.state.models import TRANSITIONS, State, Trigger
from stateful_worker.state.phases import PhaseHandlers

from conftest import RecordingJob, ScriptedToggle


class TestLoggingIntegration:
    """Test phase entry, trigger and poll tick logging."""

    def setup_method(self):
        """Set up test environment with logging capture."""
        configure_logging(level="DEBUG", format_json=True)

        self.log_messages = []
        self.mock_logger = Mock()

        def capture(level):
            def _capture(message, **kwargs):
                self.log_messages.append({'message': message, 'level': level, 'kwargs': kwargs})
            return _capture

        self.mock_logger.info = capture('info')
        self.mock_logger.warning = capture('warning')
        self.mock_logger.debug = capture('debug')
        self.mock_logger.error = capture('error')
        self.mock_logger.bind = Mock(return_value=self.mock_logger)

    def _handlers(self, toggle, cancel=None):
        machine = StateMachine()
        machine.logger = self.mock_logger
        handlers = PhaseHandlers(
            machine=machine,
            toggle=toggle,
            job=RecordingJob(),
            cancel=cancel or threading.Event(),
            poll_interval_seconds=0.0,
        )
        handlers.logger = self.mock_logger
        handlers.gating_logger = self.mock_logger
        configure_from_table(machine, handlers.entry_actions(), TRANSITIONS)
        return machine, handlers

    def test_phase_entry_logged(self):
        machine, handlers = self._handlers(ScriptedToggle())
        self.log_messages.clear()

        handlers.start()

        entries = [m for m in self.log_messages if m['kwargs'].get('event_type') == 'phase_entry']
        assert len(entries) == 1
        assert entries[0]['level'] == 'info'
        assert entries[0]['kwargs']['state'] == 'startup'
        assert entries[0]['kwargs']['handler'] == 'start'

    def test_poll_ticks_logged_at_debug(self):
        machine, handlers = self._handlers(ScriptedToggle(unset_values=[False, True]))
        machine.fire(Trigger.START)
        self.log_messages.clear()

        handlers.wait_for_reset()

        ticks = [m for m in self.log_messages if m['kwargs'].get('event_type') == 'poll_tick']
        assert [t['kwargs']['result'] for t in ticks] == [False, True]
        assert all(t['level'] == 'debug' for t in ticks)
        assert all(t['kwargs']['state'] == 'waiting_for_reset' for t in ticks)
        assert all(t['kwargs']['condition'] == 'unset' for t in ticks)
        assert [t['kwargs']['iteration'] for t in ticks] == [1, 2]

    def test_no_trigger_logged_when_cancelled_at_startup(self):
        machine, handlers = self._handlers(ScriptedToggle())
        handlers.cancel.set()
        machine.activate()
        self.log_messages.clear()

        machine.run()

        fired = [m for m in self.log_messages if m["kwargs"].get("event_type") == "trigger_fired"]
        assert fired == []
        assert machine.state == State.STARTUP

    def test_trigger_and_transition_logged(self):
        machine, handlers = self._handlers(ScriptedToggle())
        cancel = handlers.cancel
        handlers.job = RecordingJob(on_run=lambda run, c: cancel.set())
        machine.activate()
        self.log_messages.clear()

        machine.run()

        fired = [m['kwargs']['trigger'] for m in self.log_messages
                 if m['kwargs'].get('event_type') == 'trigger_fired']
        assert fired == ['start', 'reset', 'set', 'job_finished']
        assert machine.state == State.WAITING_FOR_RESET

        # transitions are logged through a bound logger
        bound = [call.kwargs for call in self.mock_logger.bind.call_args_list
                 if call.kwargs.get('event_type') == 'state_transition']
        assert [b['trigger'] for b in bound] == ['start', 'reset', 'set', 'job_finished']
        assert bound[-1]['from_state'] == 'running'
        assert bound[-1]['to_state'] == 'waiting_for_reset'

    def test_invalid_transition_logged_with_state_and_trigger(self):
        machine, _ = self._handlers(ScriptedToggle())
        self.log_messages.clear()

        try:
            machine.fire(Trigger.JOB_FINISHED)
        except InvalidTransitionError:
            pass

        warnings = [m for m in self.log_messages if m['level'] == 'warning']
        assert len(warnings) == 1
        assert warnings[0]['kwargs']['state'] == 'startup'
        assert warnings[0]['kwargs']['trigger'] == 'job_finished'


class TestLoggerFactories:
    """Test subsystem logger helpers."""

    def test_subsystem_bindings(self):
        configure_logging(level="INFO", format_json=True)

        with capture_logs() as captured:
            get_state_logger("test").info("state event")
            get_gating_logger("test").info("gating event")

        assert captured[0]['subsystem'] == 'state_machine'
        assert captured[1]['subsystem'] == 'gating'
