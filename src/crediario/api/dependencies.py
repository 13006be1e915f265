"""Per-request wiring of command handlers for FastAPI."""

from fastapi import Depends, Request

from ..commands.handlers import UserCommandHandler
from ..domain.notifications import DomainNotificationHandler
from ..events.dispatcher import EventDispatcher
from ..repositories.dependencies import get_repository_container, get_unit_of_work
from ..repositories.interfaces import RepositoryContainer, UnitOfWork


def get_event_dispatcher(request: Request) -> EventDispatcher:
    """The dispatcher built once for the application at startup."""
    return request.app.state.event_dispatcher


def get_notifications() -> DomainNotificationHandler:
    """A fresh collector for each request."""
    return DomainNotificationHandler()


def get_user_command_handler(
    container: RepositoryContainer = Depends(get_repository_container),
    uow: UnitOfWork = Depends(get_unit_of_work),
    notifications: DomainNotificationHandler = Depends(get_notifications),
    dispatcher: EventDispatcher = Depends(get_event_dispatcher),
) -> UserCommandHandler:
    return UserCommandHandler(
        person_repository=container.person,
        device_repository=container.device,
        token_repository=container.token,
        uow=uow,
        notifications=notifications,
        dispatcher=dispatcher,
    )
