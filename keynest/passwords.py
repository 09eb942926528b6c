"""Random password generation."""
import secrets

LOWER = "abcdefghijklmnopqrstuvwxyz"
UPPER = "ABCDEFGHIJKLMNOPQRSTUVWXYZ"
NUMBERS = "0123456789"
SYMBOLS = "!@#$%^&*()-_=+[]{}|;:,.<>?"

_rng = secrets.SystemRandom()


def enabled_sets(
    upper: bool = True,
    lower: bool = True,
    numbers: bool = True,
    symbols: bool = True,
) -> list[str]:
    sets = []
    if lower:
        sets.append(LOWER)
    if upper:
        sets.append(UPPER)
    if numbers:
        sets.append(NUMBERS)
    if symbols:
        sets.append(SYMBOLS)
    return sets


def generate_password(
    length: int = 20,
    upper: bool = True,
    lower: bool = True,
    numbers: bool = True,
    symbols: bool = True,
) -> str:
    """Generate a password with at least one character from each enabled set.

    The result is never shorter than the number of enabled sets.

    Raises:
        ValueError: If every character set is disabled.
    """
    sets = enabled_sets(upper=upper, lower=lower, numbers=numbers, symbols=symbols)
    if not sets:
        raise ValueError("No character sets enabled")

    length = max(length, len(sets))
    pool = "".join(sets)
    chars = [secrets.choice(charset) for charset in sets]
    while len(chars) < length:
        chars.append(secrets.choice(pool))
    _rng.shuffle(chars)
    return "".join(chars)
