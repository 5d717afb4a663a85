"""User-facing messages for identity provider failures"""

from business_manager.domain.exceptions import AuthenticationError

SIGN_IN_MESSAGES = {
    "invalid-email": "Invalid email address.",
    "user-disabled": "This account has been disabled.",
    "user-not-found": "No account found with this email.",
    "wrong-password": "Incorrect password.",
}

SIGN_UP_MESSAGES = {
    "email-already-in-use": "Email already in use.",
    "invalid-email": "Invalid email address.",
    "weak-password": "Password is too weak.",
    "operation-not-allowed": "Email/password accounts are not enabled.",
}


def describe_sign_in_error(error: AuthenticationError) -> str:
    """Map a provider code to a fixed message, falling back to the raw provider message"""
    return "Login failed. " + SIGN_IN_MESSAGES.get(error.code, error.message)


def describe_sign_up_error(error: AuthenticationError) -> str:
    return "Signup failed. " + SIGN_UP_MESSAGES.get(error.code, error.message)
