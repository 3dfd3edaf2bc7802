import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional, Sequence

from menu_packager.models.menu_models import AudienceType, MenuItem, PricedPackage
from menu_packager.parsers.postprocess import round_half_up, sum_prices

logger = logging.getLogger(__name__)

HUNDRED = Decimal(100)


@dataclass(frozen=True)
class PackagePricing:
    individual_total: Decimal
    package_value: Decimal
    savings: Decimal
    package_price: str
    total_savings: Optional[str]


def format_amount(currency: str, amount: Decimal) -> str:
    return f"{currency}{amount}"


def price_package(
    starters: Sequence[MenuItem],
    mains: Sequence[MenuItem],
    desserts: Sequence[MenuItem],
    discount_percentage,
    currency: str,
    allow_decimal: bool = False,
) -> PackagePricing:
    """
    Discounted price of a package and what it saves over ordering separately.

    Both figures are rounded half-up to whole currency units. Savings are
    taken from the rounded package value, so package price plus savings
    always gives back the rounded individual total.
    """
    discount = Decimal(str(discount_percentage))

    individual_total = sum_prices(
        [*starters, *mains, *desserts], allow_decimal=allow_decimal
    )
    package_value = round_half_up(individual_total * (1 - discount / HUNDRED))
    savings = round_half_up(individual_total - package_value)

    pricing = PackagePricing(
        individual_total=individual_total,
        package_value=package_value,
        savings=savings,
        package_price=format_amount(currency, package_value),
        total_savings=format_amount(currency, savings) if savings > 0 else None,
    )

    logger.debug(
        f"Priced package: total={individual_total} discount={discount}% "
        f"package={package_value} savings={savings}"
    )
    return pricing


def build_priced_package(
    audience_type: AudienceType,
    starters: Sequence[MenuItem],
    mains: Sequence[MenuItem],
    desserts: Sequence[MenuItem],
    discount_percentage,
    currency: str,
    allow_decimal: bool = False,
) -> PricedPackage:
    pricing = price_package(
        starters, mains, desserts, discount_percentage, currency, allow_decimal=allow_decimal
    )

    return PricedPackage(
        audience_type=audience_type,
        starters=tuple(starters),
        mains=tuple(mains),
        desserts=tuple(desserts),
        package_price=pricing.package_price,
        total_savings=pricing.total_savings,
        discount_percentage=discount_percentage,
    )
