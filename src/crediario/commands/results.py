"""
Command results.

A result is always returned. On failure its fields carry the empty sentinels
(EMPTY_ID, "" and False) and the reasons are in the notification collector.
"""

from dataclasses import dataclass
from uuid import UUID

from ..domain.entities import EMPTY_ID, Person


@dataclass(frozen=True)
class UserRegisterCommandResult:
    person_id: UUID = EMPTY_ID

    @property
    def succeeded(self) -> bool:
        return self.person_id != EMPTY_ID


@dataclass(frozen=True)
class UserAuthenticateCommandResult:
    name: str = ""
    serial_key: str = ""
    push_token: str = ""
    phone_number: str = ""
    document: str = ""
    email: str = ""
    admin: bool = False
    visitor: bool = False
    resident: bool = False

    @property
    def succeeded(self) -> bool:
        return bool(self.serial_key)

    @classmethod
    def for_person(cls, person: Person, push_token: str = "") -> "UserAuthenticateCommandResult":
        """Profile of an authenticated person, carrying its current serial key."""
        return cls(
            name=person.name,
            serial_key=person.serial_key,
            push_token=push_token or "",
            phone_number=person.phone_number or "",
            document=person.document_number,
            email=person.email,
            admin=person.admin,
            visitor=person.visitor,
            resident=person.resident,
        )


@dataclass(frozen=True)
class UserForgotPasswordCommandResult:
    serial_key: str = ""

    @property
    def succeeded(self) -> bool:
        return bool(self.serial_key)


@dataclass(frozen=True)
class UserChangePasswordCommandResult:
    serial_key: str = ""

    @property
    def succeeded(self) -> bool:
        return bool(self.serial_key)
