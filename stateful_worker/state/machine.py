"""
Phase state machine core.

The machine owns the current state, the configured transition graph and the
dispatch of entry actions. Entry actions run on the dispatch thread that
calls run(); fire() may be called from any thread.

Dispatch model:
    activate() schedules the initial state's entry action. run() takes the
    scheduled action, executes it to completion and fires the trigger it
    returns, which schedules the next state's entry action. An action that
    returns None leaves nothing scheduled and the machine parks.

At most one entry action is scheduled at a time. Once the machine is
activated, fire() called from any thread other than the dispatch thread
waits until the previously scheduled action has been picked up before
applying a new transition. All waiting happens on the dispatch condition,
so the dispatch thread can always fire the trigger its action returned.
"""

import threading
from collections import deque
from typing import Mapping, Optional

from ..errors import InvalidTransitionError, MachineConfigurationError
from ..logging.config import get_state_logger, log_state_transition, log_trigger_fired
from ..utils.time import Clock, utc_now
from .models import INITIAL_STATE, EntryAction, State, TransitionRecord, Trigger

state_logger = get_state_logger(__name__)


class StateMachine:
    """Serialized state machine over the worker phases."""

    def __init__(
        self,
        initial_state: State = INITIAL_STATE,
        history_size: int = 100,
        clock: Optional[Clock] = None,
    ) -> None:
        self.logger = state_logger
        self._initial_state = initial_state
        self._state = initial_state
        self._clock = clock or utc_now

        self._entry_actions: dict[State, EntryAction] = {}
        self._permits: dict[State, dict[Trigger, State]] = {}
        self._history: deque[TransitionRecord] = deque(maxlen=history_size)

        # _dispatch serializes transitions and guards the scheduled slot and
        # the loop flags below.
        self._dispatch = threading.Condition()
        self._scheduled: Optional[State] = None
        self._dispatch_thread: Optional[int] = None
        self._activated = False
        self._dispatching = False
        self._dispatch_started = False
        self._executing = False
        self._fault: Optional[BaseException] = None

    # -- configuration -----------------------------------------------------

    def configure(
        self,
        state: State,
        entry_action: EntryAction,
        permits: Mapping[Trigger, State],
    ) -> None:
        """
        Register a state's entry behaviour and its outgoing edges.

        Args:
            state: State being configured
            entry_action: Callable run on entering the state
            permits: Mapping of permitted trigger to destination state

        Raises:
            MachineConfigurationError: if the machine is already activated
                or the state was configured before
        """
        if self._activated:
            raise MachineConfigurationError(
                "Cannot configure an activated state machine", state=state.value
            )
        if state in self._entry_actions:
            raise MachineConfigurationError(
                f"State already configured: {state.value}", state=state.value
            )

        self._entry_actions[state] = entry_action
        self._permits[state] = dict(permits)

        self.logger.debug(
            "Configured state",
            state=state.value,
            permits={t.value: s.value for t, s in permits.items()},
        )

    def validate(self) -> None:
        """
        Check the configured graph before activation.

        Every state must be configured, every destination must be a
        configured state and every trigger must be permitted from exactly
        one source state.

        Raises:
            MachineConfigurationError: on the first inconsistency found
        """
        for state in State:
            if state not in self._entry_actions:
                raise MachineConfigurationError(
                    f"State not configured: {state.value}", state=state.value
                )

        sources: dict[Trigger, list[State]] = {trigger: [] for trigger in Trigger}
        for source, permits in self._permits.items():
            for trigger, destination in permits.items():
                if destination not in self._entry_actions:
                    raise MachineConfigurationError(
                        f"Transition {source.value} --{trigger.value}--> "
                        f"{destination.value} targets an unconfigured state",
                        state=source.value,
                    )
                sources[trigger].append(source)

        for trigger, trigger_sources in sources.items():
            if len(trigger_sources) != 1:
                raise MachineConfigurationError(
                    f"Trigger {trigger.value} must be permitted from exactly one state, "
                    f"found {len(trigger_sources)}",
                    context={"sources": [s.value for s in trigger_sources]},
                )

    # -- activation and transitions ----------------------------------------

    def activate(self) -> None:
        """
        Schedule the initial state's entry action.

        Raises:
            MachineConfigurationError: if the graph is invalid or the
                machine was already activated
        """
        self.validate()

        with self._dispatch:
            if self._activated:
                raise MachineConfigurationError("State machine already activated")
            self._activated = True
            self._scheduled = self._state
            self._dispatch.notify_all()

        self.logger.debug("State machine activated", state=self._state.value)

    def fire(self, trigger: Trigger) -> State:
        """
        Apply the transition for trigger from the current state.

        Once activated, waits until the previously scheduled entry action
        has been picked up by the dispatch loop. A fire() issued between
        activate() and run() therefore blocks until run() starts; once the
        loop has exited, fire() no longer waits.

        Returns:
            The new current state

        Raises:
            InvalidTransitionError: if trigger is not permitted from the
                current state; the state is left unchanged
        """
        with self._dispatch:
            if self._activated and threading.get_ident() != self._dispatch_thread:
                self._dispatch.wait_for(self._slot_free)
            record = self._apply(trigger)

        self._log_transition(record)
        return record.destination

    def _slot_free(self) -> bool:
        # After the loop has exited nothing will pick up a scheduled action.
        return self._scheduled is None or (self._dispatch_started and not self._dispatching)

    def _apply(self, trigger: Trigger) -> TransitionRecord:
        # Caller holds _dispatch.
        source = self._state
        destination = self._permits.get(source, {}).get(trigger)

        if destination is None:
            self.logger.warning(
                "Invalid transition",
                state=source.value,
                trigger=trigger.value,
                event_type="invalid_transition",
            )
            raise InvalidTransitionError(
                f"Trigger {trigger.value} is not permitted from state {source.value}",
                current_state=source.value,
                trigger=trigger.value,
            )

        record = TransitionRecord(
            source=source,
            trigger=trigger,
            destination=destination,
            timestamp=self._clock(),
        )
        self._state = destination
        self._history.append(record)
        if self._activated:
            self._scheduled = destination
            self._dispatch.notify_all()
        return record

    def _log_transition(self, record: TransitionRecord) -> None:
        log_state_transition(
            self.logger,
            from_state=record.source.value,
            to_state=record.destination.value,
            trigger=record.trigger.value,
        )

    # -- dispatch loop -----------------------------------------------------

    def run(self) -> None:
        """
        Dispatch scheduled entry actions until the machine parks.

        Errors raised by an entry action or by firing its trigger are
        logged and recorded in fault; they never propagate out of run().
        """
        with self._dispatch:
            if not self._activated:
                raise MachineConfigurationError("State machine must be activated before run()")
            if self._dispatching:
                raise MachineConfigurationError("Dispatch loop already running")
            self._dispatching = True
            self._dispatch_started = True
            self._dispatch_thread = threading.get_ident()

        try:
            while True:
                with self._dispatch:
                    state = self._scheduled
                    if state is None:
                        break
                    self._scheduled = None
                    self._executing = True
                    self._dispatch.notify_all()

                try:
                    self._dispatch_entry(state)
                finally:
                    with self._dispatch:
                        self._executing = False
        finally:
            with self._dispatch:
                self._dispatching = False
                self._dispatch_thread = None
                self._dispatch.notify_all()

        self.logger.info(
            "State machine parked",
            state=self._state.value,
            faulted=self._fault is not None,
        )

    def _dispatch_entry(self, state: State) -> None:
        action = self._entry_actions[state]
        try:
            trigger = action()
        except Exception as exc:
            self._record_fault(exc, state)
            return

        if trigger is None:
            return

        with self._dispatch:
            if self._state is not state:
                # another thread moved the machine while the action ran
                self.logger.warning(
                    "Discarding trigger from superseded entry action",
                    state=self._state.value,
                    entered_state=state.value,
                    trigger=trigger.value,
                )
                return
            log_trigger_fired(self.logger, state=state.value, trigger=trigger.value)
            try:
                record = self._apply(trigger)
            except InvalidTransitionError as exc:
                self._record_fault(exc, state)
                return

        self._log_transition(record)

    def _record_fault(self, exc: BaseException, state: State) -> None:
        self._fault = exc
        self.logger.error(
            "Entry action failed",
            state=state.value,
            error=str(exc),
            error_type=type(exc).__name__,
            exc_info=exc,
        )

    # -- observability -----------------------------------------------------

    @property
    def state(self) -> State:
        return self._state

    @property
    def initial_state(self) -> State:
        return self._initial_state

    @property
    def is_activated(self) -> bool:
        return self._activated

    @property
    def is_parked(self) -> bool:
        """True once activated with nothing scheduled or executing."""
        with self._dispatch:
            return self._activated and self._scheduled is None and not self._executing

    @property
    def fault(self) -> Optional[BaseException]:
        """Last error caught by the dispatch loop, if any."""
        return self._fault

    @property
    def history(self) -> list[TransitionRecord]:
        return list(self._history)

    def permitted_triggers(self) -> list[Trigger]:
        """Triggers that may be fired from the current state."""
        return list(self._permits.get(self._state, {}))

    def wait_until_parked(self, timeout: Optional[float] = None) -> bool:
        """Block until the dispatch loop has exited; False on timeout."""
        with self._dispatch:
            return self._dispatch.wait_for(
                lambda: self._activated and not self._dispatching and self._scheduled is None,
                timeout,
            )


def configure_from_table(
    machine: StateMachine,
    actions: Mapping[State, EntryAction],
    table: Mapping[State, Mapping[Trigger, State]],
) -> StateMachine:
    """Configure every state of machine from an entry-action map and a transition table."""
    for state, permits in table.items():
        machine.configure(state, actions[state], permits)
    machine.validate()
    return machine

