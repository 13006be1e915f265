"""Domain event contracts for the identity core.

Events are immutable and only published after a successful commit.
"""

from abc import abstractmethod
from datetime import datetime, timezone
from uuid import UUID, uuid4

from pydantic import BaseModel, Field, ConfigDict  # type: ignore

from .entities import Person


class BaseEvent(BaseModel):
    """Base class for all domain events."""

    model_config = ConfigDict(frozen=True)

    event_id: UUID = Field(default_factory=uuid4)
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    @abstractmethod
    def event_type(self) -> str:
        """Return the event type identifier."""
        pass


class UserForgotPasswordRequestedEvent(BaseEvent):
    """A temporary password was issued and committed for a person."""

    person: Person

    @property
    def event_type(self) -> str:
        """Return the event type identifier."""
        return "user_forgot_password_requested"


class UserPasswordChangedEvent(BaseEvent):
    """A person replaced their password and received a new serial key."""

    person_id: UUID

    @property
    def event_type(self) -> str:
        """Return the event type identifier."""
        return "user_password_changed"
