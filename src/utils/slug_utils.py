"""Slug generation utilities for timeline identifiers.

Stage and task identifiers are derived from operator-facing labels, so they
must be deterministic: the same label always produces the same slug, which
keeps stored task overrides pointing at the same checklist item.

Examples:
    >>> create_slug("Weryfikacja i płatność")
    'weryfikacja-i-platnosc'

    >>> create_slug("Proforma wystawiona i wysłana")
    'proforma-wystawiona-i-wyslana'
"""

import re
import unicodedata

# Letters NFD does not decompose into a base letter + combining mark
_TRANSLITERATIONS = str.maketrans({"ł": "l", "Ł": "L", "ø": "o", "Ø": "O", "ß": "ss"})


def create_slug(name: str, separator: str = "-") -> str:
    """Generate a URL-safe slug from a label.

    Algorithm:
        1. Transliterate letters without a Unicode decomposition
        2. Normalize Unicode to NFD and drop non-ASCII marks
        3. Convert to lowercase
        4. Collapse every run of non-alphanumerics into the separator
        5. Strip leading/trailing separators

    Args:
        name: Label to convert
        separator: Character placed between words (default "-")

    Returns:
        Slug string (lowercase alphanumerics joined by separator)

    Examples:
        >>> create_slug("Wystawiono fakturę końcową")
        'wystawiono-fakture-koncowa'

        >>> create_slug("  Extra  Spaces  ", separator="_")
        'extra_spaces'

    Note:
        Empty or whitespace-only input results in an empty slug.
    """
    slug = name.translate(_TRANSLITERATIONS)
    slug = unicodedata.normalize("NFD", slug)
    slug = slug.encode("ascii", "ignore").decode("ascii")
    slug = slug.lower()
    slug = re.sub(r"[^a-z0-9]+", separator, slug)
    return slug.strip(separator)
