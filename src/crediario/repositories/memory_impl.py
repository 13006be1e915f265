"""In-memory implementations of repository interfaces for testing.

Repositories stage copies of the entities they receive and only apply them
when the MemoryUnitOfWork commits; reads return copies of committed state.
"""

from copy import deepcopy
from typing import Callable, Dict, List, Optional
from uuid import UUID

from .interfaces import (
    UnitOfWork,
    PersonRepository,
    DeviceRepository,
    TokenRepository,
    EmailNotificationRepository,
    RepositoryContainer,
)
from ..core.enums import DeviceStatus
from ..domain.entities import Person, Device, Token, EmailNotification


class MemoryStore:
    """Committed state plus the writes staged since the last commit."""

    def __init__(self):
        self.persons: Dict[UUID, Person] = {}
        self.devices: Dict[UUID, Device] = {}
        self.tokens: Dict[UUID, Token] = {}
        self.email_notifications: List[EmailNotification] = []
        self.pending: List[Callable[[], None]] = []
        self.commit_count = 0
        self.fail_next_commit = False

    def stage(self, write: Callable[[], None]) -> None:
        self.pending.append(write)

    def discard(self) -> None:
        self.pending.clear()


class MemoryUnitOfWork(UnitOfWork):
    """Applies staged writes atomically; can be told to fail the next commit."""

    def __init__(self, store: MemoryStore):
        self._store = store

    async def commit(self) -> bool:
        if self._store.fail_next_commit:
            self._store.fail_next_commit = False
            self._store.discard()
            return False

        for write in self._store.pending:
            write()
        self._store.discard()
        self._store.commit_count += 1
        return True


class BaseMemoryRepository:
    """Base in-memory repository implementation."""

    def __init__(self, store: MemoryStore):
        self._store = store


class MemoryPersonRepository(BaseMemoryRepository, PersonRepository):
    """In-memory implementation of PersonRepository."""

    def _save(self, person: Person) -> Person:
        snapshot = deepcopy(person)
        self._store.stage(lambda: self._store.persons.__setitem__(snapshot.person_id, snapshot))
        return deepcopy(person)

    async def add(self, person: Person) -> Person:
        return self._save(person)

    async def update(self, person: Person) -> Person:
        return self._save(person)

    def _find(self, predicate: Callable[[Person], bool]) -> Optional[Person]:
        for person in self._store.persons.values():
            if predicate(person):
                return deepcopy(person)
        return None

    async def get_by_email(self, email: str) -> Optional[Person]:
        wanted = (email or "").strip().lower()
        return self._find(lambda p: p.email.lower() == wanted)

    async def get_by_serial_key(self, serial_key: str) -> Optional[Person]:
        if not serial_key:
            return None
        return self._find(lambda p: p.serial_key == serial_key)

    async def get_by_username_and_password(
        self, username: str, password: str
    ) -> Optional[Person]:
        wanted = (username or "").strip().lower()
        return self._find(lambda p: p.email.lower() == wanted and p.password == password)


class MemoryDeviceRepository(BaseMemoryRepository, DeviceRepository):
    """In-memory implementation of DeviceRepository."""

    def _save(self, device: Device) -> Device:
        snapshot = deepcopy(device)
        self._store.stage(lambda: self._store.devices.__setitem__(snapshot.device_id, snapshot))
        return deepcopy(device)

    async def add(self, device: Device) -> Device:
        return self._save(device)

    async def update(self, device: Device) -> Device:
        return self._save(device)

    async def get_by_person(self, person: Person) -> Optional[Device]:
        current = [
            d for d in self._store.devices.values()
            if d.person_id == person.person_id
            and d.active
            and d.device_status == DeviceStatus.ACTIVE
        ]
        if not current:
            return None
        return deepcopy(max(current, key=lambda d: d.created_at))

    async def get_by_identification(self, identification: str) -> Optional[Device]:
        matches = [
            d for d in self._store.devices.values() if d.identification == identification
        ]
        if not matches:
            return None
        return deepcopy(max(matches, key=lambda d: (d.active, d.created_at)))


class MemoryTokenRepository(BaseMemoryRepository, TokenRepository):
    """In-memory implementation of TokenRepository."""

    def _save(self, token: Token) -> Token:
        snapshot = deepcopy(token)
        self._store.stage(lambda: self._store.tokens.__setitem__(snapshot.token_id, snapshot))
        return deepcopy(token)

    async def add(self, token: Token) -> Token:
        return self._save(token)

    async def update(self, token: Token) -> Token:
        return self._save(token)


class MemoryEmailNotificationRepository(BaseMemoryRepository, EmailNotificationRepository):
    """In-memory outbox. Enqueued emails are visible immediately."""

    async def add(self, notification: EmailNotification) -> EmailNotification:
        self._store.email_notifications.append(deepcopy(notification))
        return notification


def create_memory_container(store: Optional[MemoryStore] = None) -> RepositoryContainer:
    """Build a RepositoryContainer backed by one MemoryStore."""
    store = store or MemoryStore()
    return RepositoryContainer(
        person_repo=MemoryPersonRepository(store),
        device_repo=MemoryDeviceRepository(store),
        token_repo=MemoryTokenRepository(store),
        email_notification_repo=MemoryEmailNotificationRepository(store),
    )
