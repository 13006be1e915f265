"""Domain event dispatching and subscribers."""

from .dispatcher import EventDispatcher
from .handlers import UserForgotPasswordRequestedEmailHandler, build_event_dispatcher

__all__ = [
    "EventDispatcher",
    "UserForgotPasswordRequestedEmailHandler",
    "build_event_dispatcher",
]
