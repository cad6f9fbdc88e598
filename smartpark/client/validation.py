"""
Client-side form validation. Invalid input never reaches the server.
"""
from email_validator import EmailNotValidError, validate_email

from smartpark.client.errors import ValidationError

MIN_USERNAME_LENGTH = 3
MIN_PASSWORD_LENGTH = 6


def validate_login(username: str, password: str) -> None:
    if not username or not password:
        raise ValidationError("Please fill in all fields")


def validate_registration(username: str, email: str, password: str, confirm_password: str) -> None:
    """Check a registration form the way the sign-up screen does."""
    if not username or not email or not password or not confirm_password:
        raise ValidationError("Please fill in all fields")
    if len(username) < MIN_USERNAME_LENGTH:
        raise ValidationError(f"Username must be at least {MIN_USERNAME_LENGTH} characters")
    try:
        validate_email(email, check_deliverability=False)
    except EmailNotValidError:
        raise ValidationError("Please enter a valid email address")
    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")
    if password != confirm_password:
        raise ValidationError("Passwords do not match")
