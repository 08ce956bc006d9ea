"""
Text canonicalization for product names.

`normalize` produces the identity key used for comparisons and catalog
deduplication; `title_case` produces the stored display form.
"""

import re
import unicodedata
from typing import Optional

_WHITESPACE = re.compile(r"\s+")


def normalize(text: Optional[str]) -> str:
    """
    Fold case, diacritics and whitespace.

    >>> normalize("  Maçã   Verde ")
    'maca verde'
    """
    if not text:
        return ""
    decomposed = unicodedata.normalize("NFKD", text.lower())
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return _WHITESPACE.sub(" ", stripped).strip()


def title_case(text: Optional[str]) -> str:
    """
    Capitalize the first letter of every word, lowercase the rest.
    Diacritics are kept: "pÃO fRANCÊS" -> "Pão Francês".
    """
    if not text:
        return ""
    words = text.strip().lower().split()
    return " ".join(word[:1].upper() + word[1:] for word in words)
