# roster/utils/validators.py
"""
Field validators shared by the request schemas and the registration wizard.

Every validator returns ``None`` when the value is acceptable and a
user-facing message otherwise, so forms can collect errors per field.
"""
import re
from typing import Any, Optional

from roster.utils.formatters import only_digits

NAME_PATTERN = re.compile(r"^[A-Za-zÀ-ÖØ-öø-ÿ\s]*$")
EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

CPF_LENGTH = 11
MIN_WEIGHT, MAX_WEIGHT = 1, 5
MIN_SCORE, MAX_SCORE = 1, 10
MIN_RATING, MAX_RATING = 0, 10


def validate_name(value: Optional[str]) -> Optional[str]:
    if not value or not value.strip():
        return "Name is required"
    if not NAME_PATTERN.match(value):
        return "Name cannot contain numbers or special characters"
    return None


def validate_email(value: Optional[str]) -> Optional[str]:
    if not value:
        return "Email is required"
    if not EMAIL_PATTERN.match(value):
        return "Please enter a valid email"
    return None


def _check_digit(digits: str, count: int) -> int:
    # weights run from count+1 down to 2 over the first `count` digits
    total = sum(int(d) * w for d, w in zip(digits[:count], range(count + 1, 1, -1)))
    remainder = (total * 10) % 11
    return 0 if remainder >= 10 else remainder


def validate_cpf(value: Optional[str]) -> Optional[str]:
    digits = only_digits(value or "")
    if not digits:
        return "CPF is required"
    if len(digits) != CPF_LENGTH:
        return "CPF must have 11 digits"
    if len(set(digits)) == 1:
        return "Invalid CPF"
    if _check_digit(digits, 9) != int(digits[9]):
        return "Invalid CPF"
    if _check_digit(digits, 10) != int(digits[10]):
        return "Invalid CPF"
    return None


def _parse_number(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    try:
        number = float(str(value).strip().replace(",", "."))
    except ValueError:
        return None
    # nan/inf parse fine but are not numbers a person typed
    if number != number or number in (float("inf"), float("-inf")):
        return None
    return number


def _validate_range(value: Any, label: str, low: float, high: float) -> Optional[str]:
    if value is None or (isinstance(value, str) and not value.strip()):
        return f"{label} is required"
    number = _parse_number(value)
    if number is None:
        return "Enter a valid number"
    if number < low or number > high:
        return f"{label} must be between {low:g} and {high:g}"
    return None


def validate_score(value: Any) -> Optional[str]:
    """Per-item evaluation score, 1 to 10."""
    return _validate_range(value, "Score", MIN_SCORE, MAX_SCORE)


def validate_rating(value: Any) -> Optional[str]:
    """Monthly rating, 0 to 10 inclusive."""
    return _validate_range(value, "Rating", MIN_RATING, MAX_RATING)


def validate_weight(value: Any) -> Optional[str]:
    if isinstance(value, bool) or not isinstance(value, int):
        return "Weight must be an integer"
    if value < MIN_WEIGHT or value > MAX_WEIGHT:
        return f"Weight must be between {MIN_WEIGHT} and {MAX_WEIGHT}"
    return None


def parse_number(value: Any) -> float:
    """Parse a value that already passed one of the range validators."""
    number = _parse_number(value)
    if number is None:
        raise ValueError(f"not a number: {value!r}")
    return number
