"""
One package-generation request, end to end.

menu items -> AI selection -> currency detection -> pricing -> PricedPackage
"""

import logging
import math
from typing import Sequence, Union

from menu_packager.config import Settings
from menu_packager.errors import InvalidDiscountError, MixedCurrencyError, PackageGenerationError
from menu_packager.models.menu_models import AudienceType, MenuData, MenuItem, PricedPackage
from menu_packager.parsers.llm_parser import PackageSelector
from menu_packager.parsers.menu_text_parser import parse_menu_text
from menu_packager.parsers.postprocess import detect_currency
from menu_packager.pricing.package_pricer import build_priced_package

logger = logging.getLogger(__name__)

DEFAULT_DISCOUNT = 10


def validate_discount(value) -> Union[int, float]:
    try:
        discount = float(value)
    except (TypeError, ValueError):
        raise InvalidDiscountError(f"Discount percentage must be a number, got {value!r}") from None

    if math.isnan(discount) or not 0 <= discount <= 100:
        raise InvalidDiscountError(f"Discount percentage must be between 0 and 100, got {value!r}")
    return int(discount) if discount.is_integer() else discount


def build_menu_data(text: str, source: str, settings: Settings) -> MenuData:
    items = parse_menu_text(text)

    # only the items picked for a package have to share a currency
    try:
        currency = detect_currency(items, default=settings.default_currency)
    except MixedCurrencyError as e:
        logger.warning(f"{e}; using {e.markers[0]!r}")
        currency = e.markers[0]

    return MenuData(
        source=source,
        items=items,
        total_items=len(items),
        currency=currency,
    )


def generate_package(
    menu_items: Sequence[MenuItem],
    audience,
    discount_percentage,
    selector: PackageSelector,
    settings: Settings,
) -> PricedPackage:
    audience = AudienceType.parse(audience)
    discount = validate_discount(discount_percentage)

    if not menu_items:
        raise PackageGenerationError("No menu items to build a package from")

    selection = selector.select(menu_items, audience)

    chosen = [*selection.starters, *selection.mains, *selection.desserts]
    currency = detect_currency(chosen, default=settings.default_currency)

    package = build_priced_package(
        audience,
        selection.starters,
        selection.mains,
        selection.desserts,
        discount,
        currency,
        allow_decimal=settings.decimal_prices,
    )

    logger.info(
        f"✓ {audience.profile.label} package: {package.package_price}"
        + (f" (saves {package.total_savings})" if package.total_savings else "")
    )
    return package
