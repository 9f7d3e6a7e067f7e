"""Human-readable messages for Identity Toolkit error codes."""

MESSAGES: dict[str, str] = {
    "EMAIL_EXISTS": "The email address is already in use by another account.",
    "DUPLICATE_EMAIL": "The email address is already in use by another account.",
    "EMAIL_NOT_FOUND": "There is no user record corresponding to this email.",
    "INVALID_EMAIL": "The email address is badly formatted.",
    "INVALID_PASSWORD": "The password is invalid.",
    "INVALID_LOGIN_CREDENTIALS": "The email or password is incorrect.",
    "WEAK_PASSWORD": "The password must be at least 6 characters long.",
    "USER_DISABLED": "The user account has been disabled.",
    "USER_NOT_FOUND": "There is no user record corresponding to this identifier.",
    "PHONE_NUMBER_EXISTS": "The phone number is already in use by another account.",
    "DUPLICATE_LOCAL_ID": "The user identifier is already in use.",
    "INVALID_PHONE_NUMBER": "The phone number is not a valid E.164 number.",
    "INVALID_PHOTO_URL": "The photo URL is invalid.",
    "INVALID_DISPLAY_NAME": "The display name is invalid.",
    "CLAIMS_TOO_LARGE": "Custom claims exceed the maximum allowed size.",
    "FORBIDDEN_CLAIM": "Custom claims use a reserved claim name.",
    "TOO_MANY_ATTEMPTS_TRY_LATER": "Too many attempts. Please try again later.",
    "OPERATION_NOT_ALLOWED": "This sign-in method is disabled for the project.",
    "INVALID_ID_TOKEN": "The credential is no longer valid. Please sign in again.",
    "NETWORK_ERROR": "The identity service could not be reached.",
}


def message_for(code: str, default: str | None = None) -> str:
    """Message for an error code, else ``default``, else the code itself.

    Codes may carry a detail suffix (``"WEAK_PASSWORD : Password should be
    at least 6 characters"``); only the leading code is looked up.
    """
    key = code.split(" : ", 1)[0].strip()
    return MESSAGES.get(key) or default or code
