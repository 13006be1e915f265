"""Abstract repository interfaces for data access layer."""

from abc import ABC, abstractmethod
from typing import Optional

from ..domain.entities import Person, Device, Token, EmailNotification


class UnitOfWork(ABC):
    """Commit boundary for repository writes."""

    @abstractmethod
    async def commit(self) -> bool:
        """Commit pending writes. Returns False when nothing was persisted."""
        pass


class PersonRepository(ABC):
    """Repository interface for Person entities."""

    @abstractmethod
    async def add(self, person: Person) -> Person:
        """Stage a new person."""
        pass

    @abstractmethod
    async def update(self, person: Person) -> Person:
        """Stage changes to an existing person, including its current token."""
        pass

    @abstractmethod
    async def get_by_email(self, email: str) -> Optional[Person]:
        """Get a person by email."""
        pass

    @abstractmethod
    async def get_by_serial_key(self, serial_key: str) -> Optional[Person]:
        """Get a person by serial key."""
        pass

    @abstractmethod
    async def get_by_username_and_password(
        self, username: str, password: str
    ) -> Optional[Person]:
        """Get a person whose email and password match the credentials."""
        pass


class DeviceRepository(ABC):
    """Repository interface for Device entities."""

    @abstractmethod
    async def add(self, device: Device) -> Device:
        """Stage a new device."""
        pass

    @abstractmethod
    async def update(self, device: Device) -> Device:
        """Stage changes to an existing device."""
        pass

    @abstractmethod
    async def get_by_person(self, person: Person) -> Optional[Device]:
        """Get the person's current (enabled and active) device."""
        pass

    @abstractmethod
    async def get_by_identification(self, identification: str) -> Optional[Device]:
        """Get a device by installation identification, preferring the current one."""
        pass


class TokenRepository(ABC):
    """Repository interface for Token entities."""

    @abstractmethod
    async def add(self, token: Token) -> Token:
        """Stage a new token."""
        pass

    @abstractmethod
    async def update(self, token: Token) -> Token:
        """Stage changes to an existing token."""
        pass


class EmailNotificationRepository(ABC):
    """Repository interface for outbound email notifications."""

    @abstractmethod
    async def add(self, notification: EmailNotification) -> EmailNotification:
        """Enqueue an email notification."""
        pass


class RepositoryContainer:
    """Container for all repository interfaces to support dependency injection."""

    def __init__(
        self,
        person_repo: PersonRepository,
        device_repo: DeviceRepository,
        token_repo: TokenRepository,
        email_notification_repo: EmailNotificationRepository,
    ):
        self.person = person_repo
        self.device = device_repo
        self.token = token_repo
        self.email_notification = email_notification_repo
