"""Core framework components for RETROCADE."""

from .state import Phase, PhaseMachine
from .events import EventBus, Event, EventType
from .input import Action, InputEvent, InputMapper
from .loop import FrameClock

__all__ = [
    "Phase",
    "PhaseMachine",
    "EventBus",
    "Event",
    "EventType",
    "Action",
    "InputEvent",
    "InputMapper",
    "FrameClock",
]
