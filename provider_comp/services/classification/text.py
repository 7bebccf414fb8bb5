"""Free-text normalization shared by every label classifier."""

import re
import unicodedata
from typing import Optional

_NON_WORD = re.compile(r"[\W_]+", re.UNICODE)


def normalize(value: Optional[str]) -> str:
    """
    Fold a label for keyword matching.

    Strips accents (NFD + combining-mark removal), lowercases, turns runs of
    punctuation/underscores into single spaces and trims.  Never raises:
    None and "" both give "".

    >>> normalize("  Não_Recuperado  (São Paulo) ")
    'nao recuperado sao paulo'
    """
    if not value:
        return ""
    decomposed = unicodedata.normalize("NFD", str(value))
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return " ".join(_NON_WORD.sub(" ", stripped.lower()).split())


def contains_any(text: str, keywords: tuple[str, ...]) -> Optional[str]:
    """Return the first keyword contained in `text`, or None."""
    for keyword in keywords:
        if keyword in text:
            return keyword
    return None
