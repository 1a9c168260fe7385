"""
Field rules for user records.

Every rule reports all of its violations so callers can return the complete
list to the client in one response.
"""

from typing import Any, Dict, List, Optional

from email_validator import EmailNotValidError, validate_email

from ..errors import FieldError, ValidationError

USERNAME_MIN_LENGTH = 5

USERNAME_REQUIRED = "Username is required"
USERNAME_NOT_ALPHANUMERIC = "Username contains non alphanumeric characters - not allowed."
PASSWORD_REQUIRED = "Password is required"
EMAIL_INVALID = "Email does not appear to be valid"


def username_errors(value: Optional[str]) -> List[str]:
    """Return every rule the username breaks."""
    if not value:
        return [USERNAME_REQUIRED, USERNAME_NOT_ALPHANUMERIC]

    problems = []
    if len(value) < USERNAME_MIN_LENGTH:
        problems.append(USERNAME_REQUIRED)
    # str.isalnum() accepts non-ASCII letters; usernames are ASCII only
    if not (value.isascii() and value.isalnum()):
        problems.append(USERNAME_NOT_ALPHANUMERIC)
    return problems


def password_errors(value: Optional[str]) -> List[str]:
    if not value:
        return [PASSWORD_REQUIRED]
    return []


def email_errors(value: Optional[str]) -> List[str]:
    if not value:
        return [EMAIL_INVALID]
    try:
        validate_email(value, check_deliverability=False)
    except EmailNotValidError:
        return [EMAIL_INVALID]
    return []


_RULES = {
    "Username": username_errors,
    "Password": password_errors,
    "Email": email_errors,
}


def collect_field_errors(fields: Dict[str, Any]) -> List[FieldError]:
    """
    Check the given fields against their rules.

    Only fields present in ``fields`` are checked, which lets updates
    revalidate just what changed.

    Args:
        fields: Mapping of field name (``Username``, ``Password``, ``Email``) to value

    Returns:
        One FieldError per violated rule, in field order
    """
    errors = []
    for name, rule in _RULES.items():
        if name not in fields:
            continue
        for msg in rule(fields[name]):
            errors.append(FieldError(param=name, msg=msg))
    return errors


def ensure_valid(fields: Dict[str, Any]) -> None:
    """Raise ValidationError listing every violation in ``fields``."""
    errors = collect_field_errors(fields)
    if errors:
        raise ValidationError(errors)
