"""Validation tiers for the user commands.

Each function returns the Checks of one tier. Predicates are closures so a
tier is only evaluated when the handler runs it.
"""

import re
from typing import List, Optional

from ..domain.entities import Device, Person
from ..domain.messages import Messages
from ..domain.validation import Check
from .inputs import (
    UserAuthenticateCommand,
    UserChangePasswordCommand,
    UserForgotPasswordCommand,
    UserRegisterCommand,
)

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def is_email(value: Optional[str]) -> bool:
    return bool(value) and EMAIL_PATTERN.match(value.strip()) is not None


def is_present(value: Optional[str]) -> bool:
    return bool(value and value.strip())


# Register

def register_local_checks(command: UserRegisterCommand) -> List[Check]:
    return [
        Check("email", Messages.EMAIL_PROPER, lambda: is_email(command.email)),
        Check(
            "password",
            Messages.USER_REGISTER_PASSWORD_PROPER,
            lambda: is_present(command.password),
        ),
    ]


def register_repository_checks(existing: Optional[Person]) -> List[Check]:
    return [
        Check(
            "email",
            Messages.USER_REGISTER_EMAIL_ALREADY_TAKEN,
            lambda: existing is None,
        ),
    ]


# Authenticate

def authenticate_local_checks(command: UserAuthenticateCommand) -> List[Check]:
    return [
        Check(
            "user",
            Messages.USER_AUTHENTICATE_USER_REQUIRED,
            lambda: is_present(command.user),
        ),
        Check(
            "password",
            Messages.USER_AUTHENTICATE_PASSWORD_REQUIRED,
            lambda: is_present(command.password),
        ),
    ]


def person_found_checks(person: Optional[Person]) -> List[Check]:
    return [
        Check("user", Messages.USER_AUTHENTICATE_LOGIN_FAILED, lambda: person is not None),
    ]


def person_active_checks(person: Person) -> List[Check]:
    return [
        Check("user", Messages.USER_AUTHENTICATE_USER_IS_INACTIVE, lambda: person.is_active),
    ]


# Forgot password

def forgot_password_local_checks(command: UserForgotPasswordCommand) -> List[Check]:
    return [Check("email", Messages.EMAIL_PROPER, lambda: is_email(command.email))]


# Change password

def change_password_local_checks(command: UserChangePasswordCommand) -> List[Check]:
    return [
        Check(
            "identification",
            Messages.USER_CHANGE_PASSWORD_IDENTIFICATION_REQUIRED,
            lambda: is_present(command.identification),
        ),
        Check(
            "serial_key",
            Messages.USER_CHANGE_PASSWORD_SERIAL_KEY_REQUIRED,
            lambda: is_present(command.serial_key),
        ),
        Check(
            "new_password",
            Messages.USER_CHANGE_PASSWORD_NEW_PASSWORD_REQUIRED,
            lambda: is_present(command.new_password),
        ),
    ]


def change_password_lookup_checks(
    person: Optional[Person], device: Optional[Device]
) -> List[Check]:
    return [
        Check(
            "serial_key",
            Messages.USER_CHANGE_PASSWORD_PERSON_NOT_FOUND,
            lambda: person is not None,
        ),
        Check(
            "identification",
            Messages.USER_CHANGE_PASSWORD_DEVICE_NOT_FOUND,
            lambda: device is not None,
        ),
    ]


def change_password_ownership_checks(person: Person, device: Device) -> List[Check]:
    return [
        Check(
            "identification",
            Messages.USER_CHANGE_PASSWORD_DEVICE_NOT_OWNED,
            lambda: device.belongs_to(person),
        ),
    ]
