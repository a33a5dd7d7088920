"""
Password Policy.

Strength levels:
0. no requirements
1. mixed case letters
2. mixed case letters and digits
3. mixed case letters, digits and a non-alphanumeric character

A minimum length applies on top of the strength level.
"""

import re


def password_pattern(min_length: int, strength: int) -> str:
    """Build the regular expression a password must fully match."""
    rules = ""
    if strength > 0:
        rules += "(?=.*[a-z])(?=.*[A-Z])"
    if strength > 1:
        rules += "(?=.*[0-9])"
    if strength > 2:
        rules += "(?=.*[^a-zA-Z0-9])"
    length = f".{{{min_length},}}" if min_length > 0 else ".*"
    return f"^{rules}{length}$"


def is_valid_password(password: str, min_length: int, strength: int) -> bool:
    if not password:
        return False
    return re.match(password_pattern(min_length, strength), password, re.DOTALL) is not None
