"""Text and phone normalization for duplicate matching.

Normalization runs before every name/email/title equality check and
before key generation, so ``"Jane  Doe "`` and ``"jane doe"`` always
compare equal.
"""

import re

# Pre-compiled regex patterns
WHITESPACE_RE = re.compile(r"\s+")
NON_DIGIT_RE = re.compile(r"\D")


def normalize_string(text: str) -> str:
    """Lower-case, trim and collapse internal whitespace runs.

    Parameters
    ----------
    text : str
        Raw name, email or title.

    Returns
    -------
    str
        Normalized text.
    """
    return WHITESPACE_RE.sub(" ", text.lower().strip())


def normalize_phone(number: str) -> str:
    """Strip every non-digit character from a phone number.

    Parameters
    ----------
    number : str
        Free-form phone number.

    Returns
    -------
    str
        Digits only (e.g. ``"+1 (555) 123-4567"`` -> ``"15551234567"``).
    """
    return NON_DIGIT_RE.sub("", number)
