# field validators for the auth, checkout and product forms
# each returns an error string, "" when the value is acceptable
import re
from typing import Dict

NAME_REGEX = re.compile(r"^[a-zA-Z\s]+$")
EMAIL_REGEX = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
PASSWORD_REGEX = re.compile(
    r"^(?=.*[a-z])(?=.*[A-Z])(?=.*\d)(?=.*[@$!%*?&#\-_.+])[A-Za-z\d@$!%*?&#\-_.+]{8,}$"
)
PHONE_REGEX = re.compile(r"^\+92\d{10}$")
OTP_REGEX = re.compile(r"^\d{6}$")

MIN_RESET_PASSWORD_LENGTH = 6


def password_checklist(value: str = "") -> Dict[str, bool]:
    return {
        "length": len(value) >= 8,
        "lower": bool(re.search(r"[a-z]", value)),
        "upper": bool(re.search(r"[A-Z]", value)),
        "digit": bool(re.search(r"\d", value)),
        "special": bool(re.search(r"[@$!%*?&#\-_.+]", value)),
    }


def validate_name(value: str) -> str:
    value = (value or "").strip()
    if not value:
        return "Full Name is required"
    if not NAME_REGEX.match(value):
        return "Name can only include letters and spaces"
    return ""


def validate_email(value: str) -> str:
    value = (value or "").strip()
    if not value:
        return "Email is required"
    if not EMAIL_REGEX.match(value):
        return "Enter a valid email address"
    return ""


def validate_password(value: str, enforce_complexity: bool = False) -> str:
    if not value:
        return "Password is required"
    if enforce_complexity and not PASSWORD_REGEX.match(value):
        return "Password does not meet complexity requirements"
    return ""


def validate_new_password(value: str) -> str:
    if not value:
        return "New password is required"
    if len(value) < MIN_RESET_PASSWORD_LENGTH:
        return f"Password must be at least {MIN_RESET_PASSWORD_LENGTH} characters"
    return ""


def validate_phone(value: str) -> str:
    value = (value or "").strip()
    if not value:
        return "Phone number is required"
    if not PHONE_REGEX.match(value):
        return "Phone must match +92XXXXXXXXXX format"
    return ""


def validate_address(value: str) -> str:
    if not (value or "").strip():
        return "Address is required"
    return ""


def validate_otp(value: str) -> str:
    value = (value or "").strip()
    if not value:
        return "OTP is required"
    if not OTP_REGEX.match(value):
        return "Enter a valid 6-digit OTP"
    return ""
