"""Failure messages pushed to the notification collector."""


class Messages:
    """Catalogue of user-facing validation messages."""

    COMMAND_REQUIRED = "The request is required."
    COMMIT_FAILED = "The operation could not be saved. Please try again."

    EMAIL_PROPER = "Please provide a valid email address."

    USER_REGISTER_PASSWORD_PROPER = "Please provide a password."
    USER_REGISTER_EMAIL_ALREADY_TAKEN = "This email address is already registered."

    USER_AUTHENTICATE_USER_REQUIRED = "The user is required."
    USER_AUTHENTICATE_PASSWORD_REQUIRED = "The password is required."
    USER_AUTHENTICATE_LOGIN_FAILED = "Invalid user or password."
    USER_AUTHENTICATE_USER_IS_INACTIVE = "This user is inactive."

    USER_CHANGE_PASSWORD_IDENTIFICATION_REQUIRED = "The device identification is required."
    USER_CHANGE_PASSWORD_SERIAL_KEY_REQUIRED = "The serial key is required."
    USER_CHANGE_PASSWORD_NEW_PASSWORD_REQUIRED = "The new password is required."
    USER_CHANGE_PASSWORD_PERSON_NOT_FOUND = "No user was found for this serial key."
    USER_CHANGE_PASSWORD_DEVICE_NOT_FOUND = "No device was found for this identification."
    USER_CHANGE_PASSWORD_DEVICE_NOT_OWNED = "This device does not belong to the user."
