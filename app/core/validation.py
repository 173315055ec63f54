"""
Field validation shared by the customer and business schemas.
Validators return None when the value is acceptable, otherwise a message.
"""

import re
from typing import Optional

ABN_WEIGHTS = [10, 1, 3, 5, 7, 9, 11, 13, 15, 17, 19]

_NON_DIGITS = re.compile(r"\D")
_PHONE = re.compile(r"^[\d\s()+-]{6,}$")

PASSWORD_MIN_LENGTH = 8
NAME_MIN_LENGTH = 2


def normalize_abn(value: Optional[str]) -> str:
    """Digits only, at most 11."""
    return _NON_DIGITS.sub("", value or "")[:11]


def abn_is_valid(value: Optional[str]) -> bool:
    """
    Australian Business Number checksum.

    Subtract 1 from the first digit, weight each digit and the sum must be
    divisible by 89.
    """
    digits = _NON_DIGITS.sub("", value or "")
    if len(digits) != 11:
        return False
    numbers = [int(d) for d in digits]
    numbers[0] -= 1
    return sum(d * w for d, w in zip(numbers, ABN_WEIGHTS)) % 89 == 0


def validate_abn(value: Optional[str]) -> Optional[str]:
    if not value:
        return None
    return None if abn_is_valid(value) else "Please enter a valid ABN."


def is_valid_phone(value: Optional[str]) -> bool:
    if not value:
        return True
    return bool(_PHONE.match(value))


def validate_password(value: Optional[str]) -> Optional[str]:
    if not value:
        return "Password is required."
    if len(value) < PASSWORD_MIN_LENGTH:
        return f"Must be at least {PASSWORD_MIN_LENGTH} characters."
    if not re.search(r"[A-Z]", value):
        return "Must include an uppercase letter."
    if not re.search(r"\d", value):
        return "Must include a number."
    return None


def validate_name(value: Optional[str]) -> Optional[str]:
    if not value or not value.strip():
        return "Name is required."
    if len(value.strip()) < NAME_MIN_LENGTH:
        return f"Name must be at least {NAME_MIN_LENGTH} characters."
    return None
