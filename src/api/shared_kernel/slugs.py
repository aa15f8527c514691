"""Identifier normalization.

Turns display names into canonical, URL-safe, lowercase identifiers (slugs).
Slugs are the uniqueness key for groups, so the transformation must be stable:
normalizing an already normalized value returns it unchanged.
"""

from __future__ import annotations

import re
import unicodedata

from shared_kernel.exceptions import InvalidArgumentError

__all__ = ["normalize"]

# Latin-extended characters that have no useful NFKD decomposition, or whose
# decomposition would lose the conventional ASCII spelling.
_TRANSLITERATION = str.maketrans(
    {
        "ğ": "g",
        "ü": "u",
        "ç": "c",
        "ş": "s",
        "ı": "i",
        "ö": "o",
        "â": "a",
        "î": "i",
        "û": "u",
        "ä": "a",
        "à": "a",
        "á": "a",
        "å": "a",
        "ã": "a",
        "æ": "ae",
        "é": "e",
        "è": "e",
        "ê": "e",
        "ë": "e",
        "í": "i",
        "ì": "i",
        "ï": "i",
        "ñ": "n",
        "ó": "o",
        "ò": "o",
        "ô": "o",
        "õ": "o",
        "ø": "o",
        "œ": "oe",
        "ú": "u",
        "ù": "u",
        "ß": "ss",
        "ý": "y",
        "ÿ": "y",
        "đ": "d",
        "ł": "l",
        "ž": "z",
        "č": "c",
        "ć": "c",
        "ř": "r",
        "š": "s",
        "ę": "e",
        "ą": "a",
        "ś": "s",
        "ź": "z",
        "ż": "z",
        "ń": "n",
    }
)

_DISALLOWED = re.compile(r"[^a-zA-Z0-9 -]")
_SEPARATORS = re.compile(r"[\s-]+")


def normalize(value: str) -> str:
    """Normalize a display name into a slug.

    Trims, Unicode-normalizes and lowercases the value, transliterates
    Latin-extended characters to ASCII, drops everything outside
    ``[a-zA-Z0-9 -]`` and joins the remaining words with single dashes.

    Args:
        value: Display name to normalize

    Returns:
        Slug such as ``"ogrenci-isleri"`` for ``"  Öğrenci İşleri "``

    Raises:
        InvalidArgumentError: If value is not a string
    """
    if not isinstance(value, str):
        raise InvalidArgumentError("value", "Value to normalize must be a string")

    text = unicodedata.normalize("NFC", value.strip()).lower()
    text = text.translate(_TRANSLITERATION)
    # Remaining accents (and the dot left over from lowercasing "İ") are split
    # off as combining marks and removed with the other disallowed characters.
    text = unicodedata.normalize("NFKD", text).lower()
    text = _DISALLOWED.sub("", text)
    return _SEPARATORS.sub("-", text).strip("-")
