"""
Connection state holder enforcing valid transitions
"""

import logging
import threading
import time
from datetime import datetime
from enum import Enum
from typing import Dict, Any, Callable, List

from events import EventTypes


logger = logging.getLogger(__name__)


class ConnectionState(Enum):
    """Connection states"""
    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    CONNECTED = "connected"


class StateTransition:
    """Represents a state transition"""
    def __init__(self, from_state: ConnectionState, to_state: ConnectionState, reason: str = ""):
        self.from_state = from_state
        self.to_state = to_state
        self.reason = reason
        self.timestamp = time.time()
        self.datetime = datetime.now()

    def __str__(self):
        return f"{self.from_state.value} → {self.to_state.value} ({self.reason})"


class StateManager:
    """Tracks connection state and rejects invalid transitions"""

    VALID_TRANSITIONS = {
        ConnectionState.DISCONNECTED: [ConnectionState.CONNECTING, ConnectionState.DISCONNECTED],
        ConnectionState.CONNECTING: [ConnectionState.CONNECTED, ConnectionState.DISCONNECTED],
        ConnectionState.CONNECTED: [ConnectionState.DISCONNECTED],
    }

    def __init__(self, dispatcher=None):
        """
        Initialize state manager

        Args:
            dispatcher: Optional EventDispatcher notified of every transition
        """
        self.current_state = ConnectionState.DISCONNECTED
        self.state_lock = threading.RLock()
        self.dispatcher = dispatcher

        self.transitions: List[StateTransition] = []
        self.max_history = 100

        self.state_listeners: List[Callable[[ConnectionState, ConnectionState], None]] = []
        self.state_start_time = time.time()

    def get_state(self) -> ConnectionState:
        """Get current state"""
        with self.state_lock:
            return self.current_state

    def transition_to(self, new_state: ConnectionState, reason: str = "") -> bool:
        """
        Transition to a new state

        Args:
            new_state: Target state
            reason: Reason for transition

        Returns:
            True if transition successful, False if invalid
        """
        with self.state_lock:
            if not self._is_valid_transition(self.current_state, new_state):
                logger.warning(f"Invalid state transition: {self.current_state.value} → {new_state.value}")
                return False

            transition = StateTransition(self.current_state, new_state, reason)
            self.transitions.append(transition)
            if len(self.transitions) > self.max_history:
                self.transitions = self.transitions[-self.max_history:]

            old_state = self.current_state
            self.current_state = new_state
            self.state_start_time = time.time()

            logger.debug(f"State transition: {transition}")

        # Notify outside the lock so listeners may query state
        if self.dispatcher is not None:
            self.dispatcher.emit(EventTypes.CONNECTION_STATE_CHANGED, {
                "from_state": old_state.value,
                "to_state": new_state.value,
                "reason": reason
            })
        self._notify_listeners(old_state, new_state)

        return True

    def add_listener(self, listener: Callable[[ConnectionState, ConnectionState], None]):
        """Add state change listener"""
        self.state_listeners.append(listener)

    def remove_listener(self, listener: Callable[[ConnectionState, ConnectionState], None]):
        """Remove state change listener"""
        if listener in self.state_listeners:
            self.state_listeners.remove(listener)

    def _is_valid_transition(self, from_state: ConnectionState, to_state: ConnectionState) -> bool:
        return to_state in self.VALID_TRANSITIONS.get(from_state, [])

    def _notify_listeners(self, old_state: ConnectionState, new_state: ConnectionState):
        for listener in list(self.state_listeners):
            try:
                listener(old_state, new_state)
            except Exception as e:
                logger.error(f"Error in state listener: {e}", exc_info=True)

    def get_state_duration(self) -> float:
        """Get duration in current state (seconds)"""
        with self.state_lock:
            return time.time() - self.state_start_time

    def get_transition_history(self, limit: int = 10) -> List[Dict[str, Any]]:
        """Get recent state transitions"""
        with self.state_lock:
            recent = self.transitions[-limit:] if self.transitions else []
            return [
                {
                    "from": t.from_state.value,
                    "to": t.to_state.value,
                    "reason": t.reason,
                    "timestamp": t.timestamp,
                    "datetime": t.datetime.isoformat()
                }
                for t in recent
            ]

    def get_stats(self) -> Dict[str, Any]:
        """Get state manager statistics"""
        with self.state_lock:
            return {
                "current_state": self.current_state.value,
                "state_duration": self.get_state_duration(),
                "transition_count": len(self.transitions)
            }
