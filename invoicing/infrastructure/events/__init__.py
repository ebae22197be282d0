"""
Infrastructure event handlers.
Registers handlers for domain events with the dispatcher.
"""

from .event_setup import LoggingEventHandler, setup_event_handlers, initialize_event_system

__all__ = [
    "LoggingEventHandler",
    "setup_event_handlers",
    "initialize_event_system",
]
