"""
Event dispatching for the client runtime
"""

from .event_bus import EventDispatcher, EventEmitter, EventTypes, HandlerFailure

__all__ = ['EventDispatcher', 'EventEmitter', 'EventTypes', 'HandlerFailure']
