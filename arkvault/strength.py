import re

_LOWER = re.compile(r"[a-z]")
_UPPER = re.compile(r"[A-Z]")
_DIGIT = re.compile(r"[0-9]")
_OTHER = re.compile(r"[^A-Za-z0-9]")


def score(password: str) -> int:
    """
    Heuristic 0-100 rating used for badges and history rows.
    Length and character-class points are additive; this is not an entropy estimate.
    """
    total = 0
    if len(password) >= 8:
        total += 20
    if len(password) >= 12:
        total += 10
    if len(password) >= 16:
        total += 10

    for pattern in (_LOWER, _UPPER, _DIGIT, _OTHER):
        if pattern.search(password):
            total += 15

    return max(0, min(total, 100))


def label(value: int) -> str:
    if value >= 90:
        return "Excellent"
    if value >= 70:
        return "Strong"
    if value >= 50:
        return "Medium"
    return "Weak"
