"""Command inputs. Field values arrive untrusted; handlers validate them."""

from dataclasses import dataclass


@dataclass(frozen=True)
class UserRegisterCommand:
    name: str = ""
    document_number: str = ""
    email: str = ""
    password: str = ""

    def __repr__(self) -> str:
        return f"UserRegisterCommand(email={self.email!r})"


@dataclass(frozen=True)
class UserAuthenticateCommand:
    """Credentials plus the installation the user signs in from."""

    user: str = ""
    password: str = ""
    identification: str = ""
    device_os: int = 1
    device_model: str = ""
    version_os: str = ""

    def __repr__(self) -> str:
        return (
            f"UserAuthenticateCommand(user={self.user!r}, "
            f"identification={self.identification!r}, device_os={self.device_os})"
        )


@dataclass(frozen=True)
class UserForgotPasswordCommand:
    email: str = ""


@dataclass(frozen=True)
class UserChangePasswordCommand:
    identification: str = ""
    serial_key: str = ""
    old_password: str = ""
    new_password: str = ""

    def __repr__(self) -> str:
        return f"UserChangePasswordCommand(identification={self.identification!r})"
