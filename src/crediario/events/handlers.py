"""Domain event handlers with side effects outside the command."""

from typing import Optional

from ..config import AppConfig, get_config
from ..domain.entities import EmailNotification
from ..domain.events import UserForgotPasswordRequestedEvent
from ..repositories.interfaces import EmailNotificationRepository
from ..utils.logging_config import get_module_logger
from .dispatcher import EventDispatcher

logger = get_module_logger(__name__)


class UserForgotPasswordRequestedEmailHandler:
    """Enqueues the temporary-password email for a password reset.

    The temporary password is sent in plain text.
    """

    def __init__(
        self,
        notification_repository: EmailNotificationRepository,
        settings: Optional[AppConfig] = None,
    ):
        self._notification_repository = notification_repository
        self._settings = settings or get_config().app

    def build_notification(self, event: UserForgotPasswordRequestedEvent) -> EmailNotification:
        person = event.person
        body = self._settings.password_reset_body_template.format(
            password=person.password, name=person.name
        )
        return EmailNotification(
            email_from=self._settings.email_from,
            email_to=person.email,
            subject=self._settings.password_reset_subject,
            body=body,
            created_at=event.timestamp,
        )

    async def __call__(self, event: UserForgotPasswordRequestedEvent) -> None:
        notification = self.build_notification(event)
        await self._notification_repository.add(notification)
        logger.info(
            f"Queued password reset email {notification.email_notification_id} "
            f"for person {event.person.person_id}"
        )


def build_event_dispatcher(
    notification_repository: EmailNotificationRepository,
    settings: Optional[AppConfig] = None,
) -> EventDispatcher:
    """Create the application's dispatcher with its standard subscriptions."""
    dispatcher = EventDispatcher()
    dispatcher.subscribe(
        UserForgotPasswordRequestedEvent,
        UserForgotPasswordRequestedEmailHandler(notification_repository, settings),
    )
    return dispatcher
