"""
Command handlers for the user-identity use cases.

Every handler method validates in tiers, stops at the first failing tier,
mutates entities only after all tiers pass, commits through the unit of work
and publishes domain events only when the commit succeeded. Business failures
never raise: the result carries its empty sentinels and the reasons are in the
DomainNotificationHandler.
"""

from typing import Any, Awaitable, Callable, Dict, List, Optional, Type

from ..auth.security import (
    generate_serial_key,
    generate_temporary_password,
    generate_user_token,
)
from ..config import AppConfig, get_config
from ..core.enums import DeviceOs
from ..domain.entities import Device, Person, Token
from ..domain.events import (
    BaseEvent,
    UserForgotPasswordRequestedEvent,
    UserPasswordChangedEvent,
)
from ..domain.messages import Messages
from ..domain.notifications import DomainNotificationHandler
from ..domain.validation import Check, run_checks
from ..events.dispatcher import EventDispatcher
from ..repositories.interfaces import (
    DeviceRepository,
    PersonRepository,
    TokenRepository,
    UnitOfWork,
)
from ..utils.logging_config import get_module_logger
from . import validations
from .inputs import (
    UserAuthenticateCommand,
    UserChangePasswordCommand,
    UserForgotPasswordCommand,
    UserRegisterCommand,
)
from .results import (
    UserAuthenticateCommandResult,
    UserChangePasswordCommandResult,
    UserForgotPasswordCommandResult,
    UserRegisterCommandResult,
)

logger = get_module_logger(__name__)


class CommandHandler:
    """Commit and publish plumbing shared by command handlers."""

    def __init__(
        self,
        uow: UnitOfWork,
        notifications: DomainNotificationHandler,
        dispatcher: EventDispatcher,
    ):
        self._uow = uow
        self._notifications = notifications
        self._dispatcher = dispatcher

    @property
    def notifications(self) -> DomainNotificationHandler:
        return self._notifications

    def is_valid(self) -> bool:
        return not self._notifications.has_notifications()

    def check(self, checks: List[Check]) -> bool:
        """Run one validation tier and log its failures."""
        result = run_checks(self._notifications, checks)
        if not result:
            logger.info(f"Validation failed for {', '.join(result.failed_keys)}")
        return result.is_valid

    async def commit(self) -> bool:
        """Commit the unit of work unless validation already failed."""
        if not self.is_valid():
            logger.warning("Refusing to commit with pending notifications")
            return False

        if await self._uow.commit():
            return True

        self._notifications.notify("commit", Messages.COMMIT_FAILED)
        logger.warning("Unit of work commit failed")
        return False

    async def publish(self, event: BaseEvent) -> None:
        await self._dispatcher.publish(event)

    def require(self, command: Any) -> bool:
        if command is None:
            self._notifications.notify("command", Messages.COMMAND_REQUIRED)
            return False
        return True


class UserCommandHandler(CommandHandler):
    """Register, Authenticate, ForgotPassword and ChangePassword."""

    def __init__(
        self,
        person_repository: PersonRepository,
        device_repository: DeviceRepository,
        token_repository: TokenRepository,
        uow: UnitOfWork,
        notifications: DomainNotificationHandler,
        dispatcher: EventDispatcher,
        settings: Optional[AppConfig] = None,
    ):
        super().__init__(uow, notifications, dispatcher)
        self._persons = person_repository
        self._devices = device_repository
        self._tokens = token_repository
        self._settings = settings or get_config().app

    async def handle(self, command: Any):
        """Execute any supported command and return its result."""
        handlers: Dict[Type, Callable[[Any], Awaitable[Any]]] = {
            UserRegisterCommand: self.register,
            UserAuthenticateCommand: self.authenticate,
            UserForgotPasswordCommand: self.forgot_password,
            UserChangePasswordCommand: self.change_password,
        }
        handler = handlers.get(type(command))
        if handler is None:
            raise TypeError(f"Unsupported command: {type(command).__name__}")
        return await handler(command)

    async def register(self, command: UserRegisterCommand) -> UserRegisterCommandResult:
        if not self.require(command):
            return UserRegisterCommandResult()

        if not self.check(validations.register_local_checks(command)):
            return UserRegisterCommandResult()

        existing = await self._persons.get_by_email(command.email)
        if not self.check(validations.register_repository_checks(existing)):
            return UserRegisterCommandResult()

        person = Person(
            name=command.name or "",
            document_number=command.document_number or "",
            email=command.email.strip(),
            password=command.password,
            serial_key=generate_serial_key(),
        )
        await self._persons.add(person)

        if not await self.commit():
            return UserRegisterCommandResult()

        logger.info(f"Registered person {person.person_id}")
        return UserRegisterCommandResult(person_id=person.person_id)

    async def authenticate(
        self, command: Optional[UserAuthenticateCommand]
    ) -> UserAuthenticateCommandResult:
        if not self.require(command):
            return UserAuthenticateCommandResult()

        if not self.check(validations.authenticate_local_checks(command)):
            return UserAuthenticateCommandResult()

        person = await self._persons.get_by_username_and_password(
            command.user, command.password
        )
        if not self.check(validations.person_found_checks(person)):
            return UserAuthenticateCommandResult()
        if not self.check(validations.person_active_checks(person)):
            return UserAuthenticateCommandResult()

        person.set_serial_key(generate_serial_key())
        device_os = DeviceOs.from_value(command.device_os)
        device = await self._reconcile_device(person, command.identification, device_os)
        await self._rotate_token(person, device_os)

        if not await self.commit():
            return UserAuthenticateCommandResult()

        logger.info(f"Authenticated person {person.person_id} on device {device.device_id}")
        return UserAuthenticateCommandResult.for_person(person, device.push_token)

    async def _reconcile_device(
        self, person: Person, identification: str, device_os: DeviceOs
    ) -> Device:
        """Keep the current device when the installation matches, else supersede it."""
        current = await self._devices.get_by_person(person)

        if current is not None and current.is_same_installation(identification):
            return current

        if current is not None:
            current.disable()
            current.deactivate()
            await self._devices.update(current)
            logger.info(f"Retired device {current.device_id} of person {person.person_id}")

        device = Device.for_person(person, identification, device_os)
        await self._devices.add(device)
        return device

    async def _rotate_token(self, person: Person, device_os: DeviceOs) -> Token:
        """Deactivate the current token, issue a new one and store it on the person."""
        if person.token is not None:
            person.token.deactivate()
            await self._tokens.update(person.token)

        token = Token(user_token=generate_user_token(), device_os=device_os)
        await self._tokens.add(token)

        person.set_token(token)
        await self._persons.update(person)
        return token

    async def forgot_password(
        self, command: UserForgotPasswordCommand
    ) -> UserForgotPasswordCommandResult:
        if not self.require(command):
            return UserForgotPasswordCommandResult()

        if not self.check(validations.forgot_password_local_checks(command)):
            return UserForgotPasswordCommandResult()

        person = await self._persons.get_by_email(command.email)
        if person is None:
            # Unknown emails look exactly like failures to the caller
            logger.info("Password reset requested for an unknown email")
            return UserForgotPasswordCommandResult()

        person.set_password(
            generate_temporary_password(self._settings.temporary_password_length)
        )
        await self._persons.update(person)

        if not await self.commit():
            return UserForgotPasswordCommandResult()

        await self.publish(UserForgotPasswordRequestedEvent(person=person))
        logger.info(f"Issued temporary password for person {person.person_id}")
        return UserForgotPasswordCommandResult(serial_key=person.serial_key)

    async def change_password(
        self, command: UserChangePasswordCommand
    ) -> UserChangePasswordCommandResult:
        if not self.require(command):
            return UserChangePasswordCommandResult()

        if not self.check(validations.change_password_local_checks(command)):
            return UserChangePasswordCommandResult()

        person = await self._persons.get_by_serial_key(command.serial_key)
        device = await self._resolve_device(person, command.identification)
        if not self.check(validations.change_password_lookup_checks(person, device)):
            return UserChangePasswordCommandResult()
        if not self.check(validations.change_password_ownership_checks(person, device)):
            return UserChangePasswordCommandResult()

        authenticated = await self._persons.get_by_username_and_password(
            person.email, command.old_password
        )
        if not self.check(validations.person_found_checks(authenticated)):
            return UserChangePasswordCommandResult()
        if not self.check(validations.person_active_checks(authenticated)):
            return UserChangePasswordCommandResult()

        authenticated.set_password(command.new_password)
        authenticated.set_serial_key(generate_serial_key())
        await self._persons.update(authenticated)

        if not await self.commit():
            return UserChangePasswordCommandResult()

        await self.publish(UserPasswordChangedEvent(person_id=authenticated.person_id))
        logger.info(f"Changed password of person {authenticated.person_id}")
        return UserChangePasswordCommandResult(serial_key=authenticated.serial_key)

    async def _resolve_device(
        self, person: Optional[Person], identification: str
    ) -> Optional[Device]:
        """Prefer the person's current device for the installation.

        Several people may authenticate from one installation, so the newest
        device with that identification can belong to someone else.
        """
        if person is not None:
            current = await self._devices.get_by_person(person)
            if current is not None and current.is_same_installation(identification):
                return current
        return await self._devices.get_by_identification(identification)
