"""SQLAlchemy concrete implementations of repository interfaces.

Repositories translate between ORM rows and domain entities. Writes are only
staged on the session; SQLAlchemyUnitOfWork commits them.
"""

from typing import Callable, Optional
from uuid import UUID

from sqlalchemy import desc, func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from .interfaces import (
    UnitOfWork,
    PersonRepository,
    DeviceRepository,
    TokenRepository,
    EmailNotificationRepository,
    RepositoryContainer,
)
from ..auth.security import check_password, encode_password
from ..core.enums import DeviceOs, DeviceStatus, PersonUserStatus
from ..db.models import PersonModel, DeviceModel, TokenModel, EmailNotificationModel
from ..domain.entities import Person, Device, Token, EmailNotification
from ..utils.logging_config import get_module_logger

logger = get_module_logger(__name__)


def _token_from_row(row: TokenModel) -> Token:
    return Token(
        token_id=row.id,
        user_token=row.user_token,
        device_os=DeviceOs.from_value(row.device_os),
        active=row.active,
        created_at=row.created_at,
    )


def _person_from_row(row: PersonModel) -> Person:
    return Person(
        person_id=row.id,
        name=row.name,
        document_number=row.document_number,
        phone_number=row.phone_number,
        email=row.email,
        password=row.password_hash,
        serial_key=row.serial_key,
        admin=row.admin,
        visitor=row.visitor,
        resident=row.resident,
        person_user_status=PersonUserStatus(row.status),
        token=_token_from_row(row.current_token) if row.current_token else None,
        created_at=row.created_at,
        password_encoded=True,
    )


def _device_from_row(row: DeviceModel) -> Device:
    return Device(
        device_id=row.id,
        description=row.description,
        device_token=row.device_token,
        push_token=row.push_token,
        sim_card_number=row.sim_card_number,
        device_os=DeviceOs.from_value(row.device_os),
        identification=row.identification,
        active=row.active,
        device_status=DeviceStatus(row.status),
        person_id=row.person_id,
        created_at=row.created_at,
    )


class SQLAlchemyUnitOfWork(UnitOfWork):
    """Commits the session shared by the repositories of one request."""

    def __init__(self, session: Session):
        self._session = session

    async def commit(self) -> bool:
        try:
            self._session.commit()
        except SQLAlchemyError as e:
            self._session.rollback()
            logger.warning(f"Commit failed and was rolled back: {type(e).__name__}: {e}")
            return False
        return True


class BaseSQLAlchemyRepository:
    """Base SQLAlchemy repository implementation."""

    def __init__(self, session: Session):
        self._session = session

    def _row(self, model, entity_id: UUID):
        row = self._session.get(model, entity_id)
        if row is None:
            row = model(id=entity_id)
            self._session.add(row)
        return row


class SQLAlchemyPersonRepository(BaseSQLAlchemyRepository, PersonRepository):
    """SQLAlchemy implementation of PersonRepository."""

    def _save(self, person: Person) -> Person:
        row = self._row(PersonModel, person.person_id)
        row.name = person.name
        row.document_number = person.document_number
        row.phone_number = person.phone_number
        row.email = person.email
        if person.password_encoded:
            row.password_hash = person.password
        else:
            row.password_hash = encode_password(person.password)
        row.serial_key = person.serial_key
        row.admin = person.admin
        row.visitor = person.visitor
        row.resident = person.resident
        row.status = person.person_user_status.value
        row.current_token_id = person.token.token_id if person.token else None
        row.created_at = person.created_at
        return person

    async def add(self, person: Person) -> Person:
        return self._save(person)

    async def update(self, person: Person) -> Person:
        return self._save(person)

    def _by_email(self, email: str) -> Optional[PersonModel]:
        wanted = (email or "").strip().lower()
        return (
            self._session.query(PersonModel)
            .filter(func.lower(PersonModel.email) == wanted)
            .first()
        )

    async def get_by_email(self, email: str) -> Optional[Person]:
        row = self._by_email(email)
        return _person_from_row(row) if row else None

    async def get_by_serial_key(self, serial_key: str) -> Optional[Person]:
        if not serial_key:
            return None
        row = (
            self._session.query(PersonModel)
            .filter(PersonModel.serial_key == serial_key)
            .first()
        )
        return _person_from_row(row) if row else None

    async def get_by_username_and_password(
        self, username: str, password: str
    ) -> Optional[Person]:
        row = self._by_email(username)
        if row is None or not check_password(password or "", row.password_hash):
            return None
        return _person_from_row(row)


class SQLAlchemyDeviceRepository(BaseSQLAlchemyRepository, DeviceRepository):
    """SQLAlchemy implementation of DeviceRepository."""

    def _save(self, device: Device) -> Device:
        row = self._row(DeviceModel, device.device_id)
        row.person_id = device.person_id
        row.description = device.description
        row.device_token = device.device_token
        row.push_token = device.push_token
        row.sim_card_number = device.sim_card_number
        row.device_os = int(device.device_os)
        row.identification = device.identification
        row.active = device.active
        row.status = device.device_status.value
        row.created_at = device.created_at
        return device

    async def add(self, device: Device) -> Device:
        return self._save(device)

    async def update(self, device: Device) -> Device:
        return self._save(device)

    async def get_by_person(self, person: Person) -> Optional[Device]:
        row = (
            self._session.query(DeviceModel)
            .filter(
                DeviceModel.person_id == person.person_id,
                DeviceModel.active.is_(True),
                DeviceModel.status == DeviceStatus.ACTIVE.value,
            )
            .order_by(desc(DeviceModel.created_at))
            .first()
        )
        return _device_from_row(row) if row else None

    async def get_by_identification(self, identification: str) -> Optional[Device]:
        row = (
            self._session.query(DeviceModel)
            .filter(DeviceModel.identification == identification)
            .order_by(desc(DeviceModel.active), desc(DeviceModel.created_at))
            .first()
        )
        return _device_from_row(row) if row else None


class SQLAlchemyTokenRepository(BaseSQLAlchemyRepository, TokenRepository):
    """SQLAlchemy implementation of TokenRepository."""

    def _save(self, token: Token) -> Token:
        row = self._row(TokenModel, token.token_id)
        row.user_token = token.user_token
        row.device_os = int(token.device_os)
        row.active = token.active
        row.created_at = token.created_at
        return token

    async def add(self, token: Token) -> Token:
        return self._save(token)

    async def update(self, token: Token) -> Token:
        return self._save(token)


class SQLAlchemyEmailNotificationRepository(EmailNotificationRepository):
    """Outbox writer with its own short-lived session.

    Emails are enqueued from event handlers, which run after the command's
    unit of work has committed, so each add commits on its own.
    """

    def __init__(self, session_factory: Callable[[], Session]):
        self._session_factory = session_factory

    async def add(self, notification: EmailNotification) -> EmailNotification:
        session = self._session_factory()
        try:
            session.add(
                EmailNotificationModel(
                    id=notification.email_notification_id,
                    email_from=notification.email_from,
                    email_to=notification.email_to,
                    subject=notification.subject,
                    body=notification.body,
                    cc=notification.cc,
                    created_at=notification.created_at,
                )
            )
            session.commit()
        except SQLAlchemyError:
            session.rollback()
            raise
        finally:
            session.close()
        return notification


def create_sqlalchemy_container(
    session: Session, session_factory: Callable[[], Session]
) -> RepositoryContainer:
    """Build a RepositoryContainer whose writes share one session."""
    return RepositoryContainer(
        person_repo=SQLAlchemyPersonRepository(session),
        device_repo=SQLAlchemyDeviceRepository(session),
        token_repo=SQLAlchemyTokenRepository(session),
        email_notification_repo=SQLAlchemyEmailNotificationRepository(session_factory),
    )
