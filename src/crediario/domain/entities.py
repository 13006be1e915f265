"""
Identity aggregates: Person, Device, Token and EmailNotification.

Entities are mutable but compare by identity id only. A Device refers to its
owner through person_id instead of holding the Person, and a Person owns its
current Token.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional
from uuid import UUID, uuid4

from ..core.enums import DeviceOs, DeviceStatus, PersonUserStatus


EMPTY_ID = UUID(int=0)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(eq=False)
class Token:
    """A session issued on a successful authentication."""

    token_id: UUID = field(default_factory=uuid4)
    user_token: str = ""
    device_os: DeviceOs = DeviceOs.UNKNOWN
    active: bool = True
    created_at: datetime = field(default_factory=_utcnow)

    def deactivate(self) -> None:
        self.active = False

    def __eq__(self, other) -> bool:
        if not isinstance(other, Token):
            return NotImplemented
        return self.token_id == other.token_id

    def __hash__(self) -> int:
        return hash(self.token_id)


@dataclass(eq=False)
class Person:
    """A registered user."""

    person_id: UUID = field(default_factory=uuid4)
    name: str = ""
    document_number: str = ""
    phone_number: str = ""
    email: str = ""
    password: str = ""
    serial_key: str = ""
    admin: bool = False
    visitor: bool = False
    resident: bool = False
    person_user_status: PersonUserStatus = PersonUserStatus.ACTIVE
    token: Optional[Token] = None
    created_at: datetime = field(default_factory=_utcnow)
    # True while password holds the stored hash rather than a plain value
    password_encoded: bool = False

    @property
    def is_active(self) -> bool:
        return self.person_user_status == PersonUserStatus.ACTIVE

    def set_serial_key(self, serial_key: str) -> None:
        self.serial_key = serial_key

    def set_password(self, password: str) -> None:
        self.password = password
        self.password_encoded = False

    def set_token(self, token: Token) -> None:
        self.token = token

    def activate(self) -> None:
        self.person_user_status = PersonUserStatus.ACTIVE

    def deactivate(self) -> None:
        self.person_user_status = PersonUserStatus.INACTIVE

    def __eq__(self, other) -> bool:
        if not isinstance(other, Person):
            return NotImplemented
        return self.person_id == other.person_id

    def __hash__(self) -> int:
        return hash(self.person_id)

    def __repr__(self) -> str:
        # Credentials stay out of reprs and logs
        return f"<Person(person_id={self.person_id}, email='{self.email}', status={self.person_user_status.value})>"


@dataclass(eq=False)
class Device:
    """A client installation a person has authenticated from.

    Disabled (device_status) and deactivated (active) are independent flags;
    a superseded device has both switched off.
    """

    device_id: UUID = field(default_factory=uuid4)
    description: str = ""
    device_token: str = ""
    push_token: str = ""
    sim_card_number: str = ""
    device_os: DeviceOs = DeviceOs.UNKNOWN
    identification: str = ""
    active: bool = True
    device_status: DeviceStatus = DeviceStatus.ACTIVE
    person_id: Optional[UUID] = None
    created_at: datetime = field(default_factory=_utcnow)

    @classmethod
    def for_person(cls, person: Person, identification: str, device_os: DeviceOs) -> "Device":
        """Create an enabled, active device bound to a person."""
        return cls(
            device_token=identification or "",
            device_os=device_os,
            identification=identification or "",
            person_id=person.person_id,
        )

    def is_same_installation(self, identification: Optional[str]) -> bool:
        return self.identification == (identification or "")

    def belongs_to(self, person: Optional[Person]) -> bool:
        return person is not None and self.person_id == person.person_id

    def enable(self) -> None:
        self.device_status = DeviceStatus.ACTIVE

    def disable(self) -> None:
        self.device_status = DeviceStatus.INACTIVE

    def activate(self) -> None:
        self.active = True

    def deactivate(self) -> None:
        self.active = False

    def __eq__(self, other) -> bool:
        if not isinstance(other, Device):
            return NotImplemented
        return self.device_id == other.device_id

    def __hash__(self) -> int:
        return hash(self.device_id)


@dataclass(eq=False)
class EmailNotification:
    """An outbound email waiting to be delivered."""

    email_from: str
    email_to: str
    subject: str
    body: str
    cc: str = ""
    email_notification_id: UUID = field(default_factory=uuid4)
    created_at: datetime = field(default_factory=_utcnow)

    def __eq__(self, other) -> bool:
        if not isinstance(other, EmailNotification):
            return NotImplemented
        return self.email_notification_id == other.email_notification_id

    def __hash__(self) -> int:
        return hash(self.email_notification_id)
