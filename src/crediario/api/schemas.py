"""Pydantic models for API request/response validation."""

from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, Field, ConfigDict  # type: ignore

from ..core.enums import DeviceOs


# Base response models
class BaseResponse(BaseModel):
    """Base response model with common fields."""

    model_config = ConfigDict(from_attributes=True)


class NotificationResponse(BaseModel):
    """One validation failure reported by a command."""

    key: str = Field(description="Input or rule the failure refers to")
    message: str = Field(description="Human-readable failure message")


class ProblemDetails(BaseModel):
    """RFC 9457 Problem Details for HTTP APIs."""

    type: str = Field(description="A URI reference that identifies the problem type")
    title: str = Field(
        description="A short, human-readable summary of the problem type"
    )
    status: int = Field(description="The HTTP status code")
    detail: Optional[str] = Field(
        None, description="A human-readable explanation specific to this occurrence"
    )
    instance: Optional[str] = Field(
        None, description="A URI reference that identifies the specific occurrence"
    )
    notifications: List[NotificationResponse] = Field(
        default_factory=list, description="Validation failures, when any"
    )


# User command schemas
class RegisterRequest(BaseModel):
    """Schema for user registration."""

    name: str = Field("", description="Display name", max_length=255)
    document_number: str = Field("", description="Identity document number", max_length=64)
    email: str = Field("", description="Email address, used as the login")
    password: str = Field("", description="Password")


class RegisterResponse(BaseResponse):
    """Schema for registration response."""

    person_id: UUID = Field(description="UUID of the registered person")


class AuthenticateRequest(BaseModel):
    """Schema for authentication from a client installation."""

    user: str = Field("", description="Email of the person")
    password: str = Field("", description="Password")
    identification: str = Field("", description="Installation fingerprint of the device")
    device_os: int = Field(
        DeviceOs.ANDROID.value, description="Device OS (0 unknown, 1 Android, 2 iOS, 3 Windows Phone)"
    )
    device_model: str = Field("", description="Device model")
    version_os: str = Field("", description="OS version")


class AuthenticateResponse(BaseResponse):
    """Profile of the authenticated person and the new serial key."""

    name: str
    serial_key: str
    push_token: str
    phone_number: str
    document: str
    email: str
    admin: bool
    visitor: bool
    resident: bool


class ForgotPasswordRequest(BaseModel):
    """Schema for password reset request."""

    email: str = Field("", description="Email of the account")


class ChangePasswordRequest(BaseModel):
    """Schema for password change."""

    identification: str = Field("", description="Installation fingerprint of the device")
    serial_key: str = Field("", description="Serial key from the last authentication")
    old_password: str = Field("", description="Current password")
    new_password: str = Field("", description="New password")


class SerialKeyResponse(BaseResponse):
    """Schema for responses carrying a serial key."""

    serial_key: str = Field(description="Serial key, empty when the request did not succeed")


class AcceptedResponse(BaseResponse):
    """Schema for requests accepted for asynchronous processing."""

    message: str = Field(description="Fixed acknowledgement text")
