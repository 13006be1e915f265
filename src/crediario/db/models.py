"""SQLAlchemy models for the identity core."""

from datetime import datetime, timezone
from uuid import UUID, uuid4

from sqlalchemy import (
    Column,
    String,
    Integer,
    DateTime,
    Boolean,
    Text,
    ForeignKey,
    Index,
)
from sqlalchemy.dialects.postgresql import UUID as PG_UUID
from sqlalchemy.orm import relationship
from sqlalchemy.types import TypeDecorator, CHAR

from .database import Base


class GUID(TypeDecorator):
    """Platform-independent GUID type using String for SQLite."""

    impl = CHAR
    cache_ok = True

    def load_dialect_impl(self, dialect):
        if dialect.name == "postgresql":
            return dialect.type_descriptor(PG_UUID())
        else:
            return dialect.type_descriptor(CHAR(36))

    def process_bind_param(self, value, dialect):
        if value is None:
            return value
        return str(value)

    def process_result_value(self, value, dialect):
        if value is None:
            return value
        if not isinstance(value, UUID):
            return UUID(str(value))
        return value


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TokenModel(Base):
    """A session token; superseded rows are deactivated, never deleted."""

    __tablename__ = "tokens"

    id = Column(GUID(), primary_key=True, default=uuid4)
    user_token = Column(String(64), nullable=False, unique=True)
    device_os = Column(Integer, nullable=False, default=0)
    active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)

    def __repr__(self) -> str:
        return f"<TokenModel(id={self.id}, active={self.active})>"


class PersonModel(Base):
    """A registered user."""

    __tablename__ = "persons"

    id = Column(GUID(), primary_key=True, default=uuid4)
    name = Column(String(255), nullable=False, default="")
    document_number = Column(String(64), nullable=False, default="")
    phone_number = Column(String(32), nullable=False, default="")
    email = Column(String(255), nullable=False, unique=True)
    password_hash = Column(String(255), nullable=False)
    serial_key = Column(String(64), nullable=False)
    admin = Column(Boolean, nullable=False, default=False)
    visitor = Column(Boolean, nullable=False, default=False)
    resident = Column(Boolean, nullable=False, default=False)
    status = Column(String(16), nullable=False, default="active")
    current_token_id = Column(GUID(), ForeignKey("tokens.id"), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)

    # Relationships
    current_token = relationship("TokenModel", foreign_keys=[current_token_id])
    devices = relationship("DeviceModel", back_populates="person")

    __table_args__ = (
        Index("ix_person_email", "email"),
        Index("ix_person_serial_key", "serial_key"),
    )

    def __repr__(self) -> str:
        return f"<PersonModel(id={self.id}, email='{self.email}')>"


class DeviceModel(Base):
    """A client installation a person authenticated from."""

    __tablename__ = "devices"

    id = Column(GUID(), primary_key=True, default=uuid4)
    person_id = Column(GUID(), ForeignKey("persons.id"), nullable=False)
    description = Column(String(255), nullable=False, default="")
    device_token = Column(String(255), nullable=False, default="")
    push_token = Column(String(255), nullable=False, default="")
    sim_card_number = Column(String(64), nullable=False, default="")
    device_os = Column(Integer, nullable=False, default=0)
    identification = Column(String(255), nullable=False)
    active = Column(Boolean, nullable=False, default=True)
    status = Column(String(16), nullable=False, default="active")
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)

    # Relationships
    person = relationship("PersonModel", back_populates="devices")

    __table_args__ = (
        Index("ix_device_identification", "identification"),
        Index("ix_device_person_current", "person_id", "active", "status"),
    )

    def __repr__(self) -> str:
        return f"<DeviceModel(id={self.id}, person_id={self.person_id}, active={self.active})>"


class EmailNotificationModel(Base):
    """Outbox row for an email waiting to be delivered."""

    __tablename__ = "email_notifications"

    id = Column(GUID(), primary_key=True, default=uuid4)
    email_from = Column(String(255), nullable=False)
    email_to = Column(String(255), nullable=False)
    subject = Column(String(255), nullable=False)
    body = Column(Text, nullable=False)
    cc = Column(String(255), nullable=False, default="")
    sent_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)

    __table_args__ = (Index("ix_email_notification_pending", "sent_at"),)
