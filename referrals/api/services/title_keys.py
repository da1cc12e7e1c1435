# This file turns referral titles into comparison keys for the uniqueness check.
# Strength 2 ignores case only; strength 1 also ignores accents and other combining marks.

from __future__ import annotations

import unicodedata

PRIMARY_STRENGTH = 1
SECONDARY_STRENGTH = 2


def normalize_title(title: str, *, strength: int = SECONDARY_STRENGTH) -> str:
    """Return the key under which two titles compare equal.

    >>> normalize_title("Straße") == normalize_title("STRASSE")
    True
    >>> normalize_title("Café", strength=1) == normalize_title("cafe", strength=1)
    True
    """

    if strength not in (PRIMARY_STRENGTH, SECONDARY_STRENGTH):
        raise ValueError(f"Unsupported collation strength: {strength!r}")

    key = unicodedata.normalize("NFKC", title).casefold()
    if strength == PRIMARY_STRENGTH:
        decomposed = unicodedata.normalize("NFKD", key)
        key = "".join(char for char in decomposed if not unicodedata.combining(char))
    return unicodedata.normalize("NFC", key)
