"""Custom middleware for API request/response processing."""

from typing import Callable, Iterable, Optional

from fastapi import Request, Response, status
from fastapi.exceptions import HTTPException, RequestValidationError
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from ..domain.notifications import DomainNotification
from ..utils.logging_config import log_exception


class ProblemDetailsException(HTTPException):
    """Enhanced HTTPException that includes RFC 9457 Problem Details."""

    def __init__(
        self,
        status_code: int,
        title: str,
        detail: Optional[str] = None,
        type_uri: Optional[str] = None,
        instance: Optional[str] = None,
        **extra_fields,
    ):
        super().__init__(status_code=status_code, detail=detail)
        self.title = title
        self.type_uri = type_uri or f"https://httpstatuses.com/{status_code}"
        self.instance = instance
        self.extra_fields = extra_fields


class CommandRejectedException(ProblemDetailsException):
    """A command finished with notifications; rendered as 422 with the list."""

    def __init__(self, notifications: Iterable[DomainNotification], instance: Optional[str] = None):
        super().__init__(
            status_code=422,
            title="Command Rejected",
            detail="The request could not be completed",
            instance=instance,
            notifications=[{"key": n.key, "message": n.value} for n in notifications],
        )


def problem_response(
    status_code: int,
    title: str,
    detail: Optional[str] = None,
    type_uri: Optional[str] = None,
    instance: Optional[str] = None,
    **extra_fields,
) -> JSONResponse:
    """Create a JSON response in RFC 9457 Problem Details format."""
    problem = {
        "type": type_uri or f"https://httpstatuses.com/{status_code}",
        "title": title,
        "status": status_code,
    }

    if detail:
        problem["detail"] = detail
    if instance:
        problem["instance"] = instance

    # Add any extra fields
    problem.update(extra_fields)

    return JSONResponse(
        status_code=status_code,
        content=problem,
        media_type="application/problem+json",
    )


async def problem_details_exception_handler(
    request: Request, exc: ProblemDetailsException
) -> JSONResponse:
    """Exception handler registered on the app for ProblemDetailsException."""
    return problem_response(
        status_code=exc.status_code,
        title=exc.title,
        detail=exc.detail,
        type_uri=exc.type_uri,
        instance=exc.instance or str(request.url),
        **exc.extra_fields,
    )


class ProblemDetailsMiddleware(BaseHTTPMiddleware):
    """Middleware to convert uncaught exceptions to RFC 9457 Problem Details format."""

    def __init__(self, app: ASGIApp):
        super().__init__(app)

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        try:
            response = await call_next(request)
            return response
        except ProblemDetailsException as exc:
            return await problem_details_exception_handler(request, exc)
        except HTTPException as exc:
            return problem_response(
                status_code=exc.status_code,
                title=self._get_default_title(exc.status_code),
                detail=exc.detail,
                instance=str(request.url),
            )
        except RequestValidationError as exc:
            return problem_response(
                status_code=422,
                title="Validation Error",
                detail="Request validation failed",
                instance=str(request.url),
                errors=exc.errors(),
            )
        except Exception as exc:
            log_exception("api", exc, {"method": request.method, "path": request.url.path})
            return problem_response(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                title="Internal Server Error",
                detail="An unexpected error occurred",
                instance=str(request.url),
            )

    def _get_default_title(self, status_code: int) -> str:
        """Get default title for HTTP status codes."""
        titles = {
            400: "Bad Request",
            404: "Not Found",
            405: "Method Not Allowed",
            422: "Unprocessable Entity",
            500: "Internal Server Error",
            503: "Service Unavailable",
        }
        return titles.get(status_code, "HTTP Error")
