"""User identity API endpoints."""

from fastapi import APIRouter, Depends, Request, status

from ..commands.handlers import UserCommandHandler
from ..commands.inputs import (
    UserAuthenticateCommand,
    UserChangePasswordCommand,
    UserForgotPasswordCommand,
    UserRegisterCommand,
)
from ..utils.logging_config import get_module_logger
from .dependencies import get_user_command_handler
from .middleware import CommandRejectedException
from .schemas import (
    AcceptedResponse,
    AuthenticateRequest,
    AuthenticateResponse,
    ChangePasswordRequest,
    ForgotPasswordRequest,
    ProblemDetails,
    RegisterRequest,
    RegisterResponse,
    SerialKeyResponse,
)

logger = get_module_logger(__name__)

router = APIRouter(prefix="/v1/users", tags=["users"])

REJECTED = {422: {"model": ProblemDetails, "description": "Command rejected"}}

PASSWORD_RESET_ACCEPTED = (
    "If the address belongs to an account, a temporary password has been sent to it."
)


def _reject_if_notified(handler: UserCommandHandler, request: Request) -> None:
    if handler.notifications.has_notifications():
        logger.info(
            f"{request.url.path} rejected: {', '.join(handler.notifications.keys())}"
        )
        raise CommandRejectedException(handler.notifications, instance=str(request.url))


@router.post("/register", response_model=RegisterResponse, responses=REJECTED)
async def register(
    body: RegisterRequest,
    request: Request,
    handler: UserCommandHandler = Depends(get_user_command_handler),
) -> RegisterResponse:
    """Register a new person and return its id."""
    result = await handler.register(UserRegisterCommand(**body.model_dump()))
    _reject_if_notified(handler, request)
    return RegisterResponse(person_id=result.person_id)


@router.post("/authenticate", response_model=AuthenticateResponse, responses=REJECTED)
async def authenticate(
    body: AuthenticateRequest,
    request: Request,
    handler: UserCommandHandler = Depends(get_user_command_handler),
) -> AuthenticateResponse:
    """
    Authenticate from a client installation.

    Rotates the serial key, supersedes the previous device when the
    identification changed, and issues a new session token.
    """
    result = await handler.authenticate(UserAuthenticateCommand(**body.model_dump()))
    _reject_if_notified(handler, request)
    return AuthenticateResponse.model_validate(result)


@router.post(
    "/forgot-password",
    status_code=status.HTTP_202_ACCEPTED,
    response_model=AcceptedResponse,
    responses=REJECTED,
)
async def forgot_password(
    body: ForgotPasswordRequest,
    request: Request,
    handler: UserCommandHandler = Depends(get_user_command_handler),
) -> AcceptedResponse:
    """
    Request a temporary password by email.

    Known and unknown addresses get the same 202 body; the serial key in the
    command result never leaves the server.
    """
    await handler.forgot_password(UserForgotPasswordCommand(email=body.email))
    _reject_if_notified(handler, request)
    return AcceptedResponse(message=PASSWORD_RESET_ACCEPTED)


@router.post("/change-password", response_model=SerialKeyResponse, responses=REJECTED)
async def change_password(
    body: ChangePasswordRequest,
    request: Request,
    handler: UserCommandHandler = Depends(get_user_command_handler),
) -> SerialKeyResponse:
    """Replace the password and return the new serial key."""
    result = await handler.change_password(UserChangePasswordCommand(**body.model_dump()))
    _reject_if_notified(handler, request)
    return SerialKeyResponse(serial_key=result.serial_key)
