"""Transfer invoice extraction - reads date and amount out of transactional PDF text"""

import logging
import re
import unicodedata

from nalo_connector.domain.models import ExtractedFields
from nalo_connector.utils.date_utils import parse_french_date

logger = logging.getLogger(__name__)

TRANSFER_MARKER = "Versement complémentaire"

_DATE_LINE_RE = re.compile(r"^Paris,\s+le\s+(.*)$")
_AMOUNT_RE = re.compile(r"Montant\s*\n\s*brut\s*\n\s*versé:\s*\n\s*(.*?)\s*\n\s*Euros")


def normalize_price(price: str) -> float:
    """
    Convert a French formatted price to a float.

    "12,50" -> 12.5, "1 000,00" -> 1000.0

    Raises:
        ValueError: If the text is not a number once normalized
    """
    return float(re.sub(r"\s", "", price.replace(",", ".", 1)))


def extract(text: str) -> ExtractedFields:
    """
    Classify a transactional document and read its transfer date and amount.

    Only documents with a line reading exactly "Versement complémentaire" are
    transfer invoices; anything else comes back with ignore=True. A missing or
    ambiguous date or amount is logged and left unset.
    """
    text = unicodedata.normalize("NFC", text)
    lines = text.split("\n")

    if not any(line.strip() == TRANSFER_MARKER for line in lines):
        logger.debug("Not a transfer invoice")
        return ExtractedFields(ignore=True)

    fields = ExtractedFields(ignore=False)

    date_matches = [m for m in (_DATE_LINE_RE.match(line.rstrip("\r")) for line in lines) if m]
    if len(date_matches) != 1:
        logger.warning(f"No date or too many dates found (count={len(date_matches)})")
    else:
        fields.date = parse_french_date(date_matches[0].group(1))
        if fields.date is None:
            logger.warning(f"Unreadable date: {date_matches[0].group(1)!r}")

    amount_match = _AMOUNT_RE.search(text)
    if not amount_match:
        logger.warning("No amount found")
    else:
        try:
            fields.amount = normalize_price(amount_match.group(1))
        except ValueError:
            logger.warning(f"Unreadable amount: {amount_match.group(1)!r}")

    return fields
