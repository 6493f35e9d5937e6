"""Date parsing utilities for French documents"""

import re
import unicodedata
from datetime import date
from typing import Optional

_FRENCH_MONTHS = {
    "janvier": 1, "fevrier": 2, "mars": 3, "avril": 4, "mai": 5, "juin": 6,
    "juillet": 7, "aout": 8, "septembre": 9, "octobre": 10, "novembre": 11, "decembre": 12,
}

_FRENCH_DATE_RE = re.compile(r"^(\d{1,2})(?:er)?\s+(\S+)\s+(\d{4})\b")


def _strip_accents(text: str) -> str:
    decomposed = unicodedata.normalize("NFD", text)
    return "".join(c for c in decomposed if not unicodedata.combining(c))


def parse_french_date(text: str) -> Optional[date]:
    """
    Parse a day-month-year date written in French words.

    Examples:
        "14 mars 2023"     -> date(2023, 3, 14)
        "1er février 2022" -> date(2022, 2, 1)

    Returns None when the text is not such a date.
    """
    m = _FRENCH_DATE_RE.match(text.strip())
    if not m:
        return None

    month = _FRENCH_MONTHS.get(_strip_accents(m.group(2)).lower().rstrip("."))
    if month is None:
        return None

    try:
        return date(int(m.group(3)), month, int(m.group(1)))
    except ValueError:
        return None
