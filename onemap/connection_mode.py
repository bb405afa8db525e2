"""
Connection Mode Controller - turns two node clicks into one edge.

States:
    IDLE                      clicks are plain selection, not handled here
    AWAITING_SOURCE           next click picks the source node
    AWAITING_TARGET(source)   next click on another node connects

toggle() switches the mode on (IDLE -> AWAITING_SOURCE) or cancels any
in-progress connection. Clicking the source node again while waiting for a
target changes nothing. There is no timeout.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional


class ConnectionPhase(Enum):
    IDLE = "idle"
    AWAITING_SOURCE = "awaiting_source"
    AWAITING_TARGET = "awaiting_target"


@dataclass(frozen=True)
class ConnectionState:
    """Immutable snapshot of the connection mode."""
    phase: ConnectionPhase = ConnectionPhase.IDLE
    source_id: Optional[str] = None

    @property
    def is_active(self) -> bool:
        return self.phase is not ConnectionPhase.IDLE


IDLE = ConnectionState()
AWAITING_SOURCE = ConnectionState(ConnectionPhase.AWAITING_SOURCE)


def awaiting_target(source_id: str) -> ConnectionState:
    return ConnectionState(ConnectionPhase.AWAITING_TARGET, source_id)


class ConnectionModeController:
    """Manages connect-mode state and calls connect() when two nodes are picked."""

    def __init__(self, connect: Callable[[str, str], None]):
        self._connect = connect
        self._state = IDLE
        self._on_state_change: Optional[Callable[[ConnectionState], None]] = None

    @property
    def state(self) -> ConnectionState:
        return self._state

    @property
    def is_active(self) -> bool:
        return self._state.is_active

    def set_on_state_change(self, callback: Callable[[ConnectionState], None]):
        self._on_state_change = callback

    def toggle(self) -> ConnectionState:
        if self._state.phase is ConnectionPhase.IDLE:
            return self._set(AWAITING_SOURCE)
        return self._set(IDLE)

    def cancel(self) -> ConnectionState:
        return self._set(IDLE)

    def begin_from(self, node_id: str) -> ConnectionState:
        """Start a connection with node_id already chosen as the source."""
        return self._set(awaiting_target(node_id))

    def node_clicked(self, node_id: str) -> ConnectionState:
        """
        Feed a node click into the state machine.

        Returns the state after the click. In IDLE the click is ignored.
        """
        phase = self._state.phase

        if phase is ConnectionPhase.AWAITING_SOURCE:
            return self._set(awaiting_target(node_id))

        if phase is ConnectionPhase.AWAITING_TARGET:
            source_id = self._state.source_id
            if node_id == source_id:
                return self._state
            # Leave connect mode even if connect() rejects the pair
            try:
                self._connect(source_id, node_id)
            finally:
                self._set(IDLE)
            return self._state

        return self._state

    def _set(self, state: ConnectionState) -> ConnectionState:
        if state != self._state:
            self._state = state
            if self._on_state_change:
                self._on_state_change(state)
        return self._state
