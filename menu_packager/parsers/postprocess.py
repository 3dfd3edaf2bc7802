import re
import logging
from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, Iterable, Optional

from menu_packager.errors import MixedCurrencyError
from menu_packager.models.menu_models import MenuItem

logger = logging.getLogger(__name__)

DEFAULT_CURRENCY = "£"

# first digit run; "1,200" style thousands groups belong to the run
PRICE_RE = re.compile(r"\d{1,3}(?:,\d{3})+(?!\d)|\d+")
DECIMAL_PRICE_RE = re.compile(r"(?:\d{1,3}(?:,\d{3})+(?!\d)|\d+)(?:\.\d+)?")

# non-digit run sitting in front of the first digit
CURRENCY_PREFIX_RE = re.compile(r"^\s*([^\d]+?)\s*\d")
# "Rs", "Rs.", "USD", "Kr."
CURRENCY_CODE_RE = re.compile(r"[A-Za-z]{1,3}\.?")
CURRENCY_SYMBOL_RE = re.compile(r"[^\w\s]+$")

WHOLE_UNIT = Decimal("1")


def extract_price(price: Optional[str], allow_decimal: bool = False) -> Optional[Decimal]:
    """
    Numeric value of a free-form price string, or None when it has no digits.

    Only the first digit run counts, so "$12.99" is 12 unless `allow_decimal`
    is set. Currency symbols and words around the number are ignored.
    """
    if price is None:
        return None

    pattern = DECIMAL_PRICE_RE if allow_decimal else PRICE_RE
    m = pattern.search(str(price))
    if not m:
        return None
    return Decimal(m.group().replace(",", ""))


def currency_marker(price: Optional[str]) -> Optional[str]:
    if not price:
        return None
    m = CURRENCY_PREFIX_RE.match(price)
    if not m:
        return None

    # only the token touching the number counts: "Small £8" -> "£"
    tokens = m.group(1).split()
    if not tokens:
        return None
    token = tokens[-1].strip("+-")
    if not token:
        return None

    if CURRENCY_CODE_RE.fullmatch(token):
        return token
    symbol = CURRENCY_SYMBOL_RE.search(token)
    if symbol:
        return symbol.group()
    return None


def _marker_key(marker: str) -> str:
    return marker.rstrip(".").casefold()


def detect_currency(items: Iterable[MenuItem], default: str = DEFAULT_CURRENCY) -> str:
    """
    Currency marker shared by the item prices.

    Items without a marker are skipped. Falls back to `default` when no item
    has one. "Rs." and "Rs" count as the same marker; the first spelling seen
    is returned. Raises MixedCurrencyError when items disagree.
    """
    markers: Dict[str, str] = {}
    for it in items:
        marker = currency_marker(it.price)
        if marker:
            markers.setdefault(_marker_key(marker), marker)

    if len(markers) > 1:
        raise MixedCurrencyError(markers.values())
    if markers:
        return next(iter(markers.values()))
    return default


def sum_prices(items: Iterable[MenuItem], allow_decimal: bool = False) -> Decimal:
    total = Decimal(0)
    for it in items:
        value = extract_price(it.price, allow_decimal=allow_decimal)
        if value is None:
            logger.debug(f"No price found for {it.name!r} ({it.price!r}); counting as 0")
            continue
        total += value
    return total


def round_half_up(value: Decimal) -> Decimal:
    return Decimal(value).quantize(WHOLE_UNIT, rounding=ROUND_HALF_UP)
