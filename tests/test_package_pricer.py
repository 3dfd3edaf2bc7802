from decimal import Decimal

from menu_packager.models.menu_models import AudienceType, MenuItem
from menu_packager.pricing.package_pricer import build_priced_package, price_package


def item(name, price):
    return MenuItem(name=name, price=price)


STARTERS = [item("Soup", "£30"), item("Bruschetta", "£20")]
MAINS = [item("Steak", "£100")]
DESSERTS = [item("Cake", "£50")]


def test_ten_percent_off_two_hundred():
    pricing = price_package(STARTERS, MAINS, DESSERTS, 10, "£")

    assert pricing.individual_total == 200
    assert pricing.package_value == 180
    assert pricing.savings == 20
    assert pricing.package_price == "£180"
    assert pricing.total_savings == "£20"


def test_empty_courses_price_to_zero_without_savings():
    pricing = price_package([], [], [], 10, "£")

    assert pricing.package_value == 0
    assert pricing.package_price == "£0"
    assert pricing.total_savings is None


def test_no_discount_means_no_savings():
    pricing = price_package(STARTERS, MAINS, DESSERTS, 0, "Rs.")

    assert pricing.package_price == "Rs.200"
    assert pricing.total_savings is None


def test_unparseable_prices_contribute_nothing():
    pricing = price_package([item("Soup", "N/A")], [item("Steak", "£40")], [], 25, "£")

    assert pricing.individual_total == 40
    assert pricing.package_price == "£30"
    assert pricing.total_savings == "£10"


def test_rounds_half_up_to_whole_units():
    # 45 * 0.9 = 40.5
    pricing = price_package([item("A", "£45")], [], [], 10, "£")

    assert pricing.package_value == 41
    assert pricing.savings == 4


def test_package_and_savings_add_up_in_decimal_mode():
    pricing = price_package(
        [item("Pizza", "$12.99")], [item("Salad", "$8.50")], [], 15, "$", allow_decimal=True
    )

    assert pricing.individual_total == Decimal("21.49")
    # 21.49 * 0.85 = 18.2665
    assert pricing.package_value == 18
    assert pricing.savings == 3
    assert pricing.package_price == "$18"


def test_fractional_discount():
    pricing = price_package(STARTERS, MAINS, DESSERTS, 12.5, "£")

    assert pricing.package_value == 175
    assert pricing.total_savings == "£25"


def test_same_inputs_same_output():
    first = build_priced_package(AudienceType.FAMILY, STARTERS, MAINS, DESSERTS, 10, "£")
    second = build_priced_package(AudienceType.FAMILY, STARTERS, MAINS, DESSERTS, 10, "£")

    assert first == second


def test_priced_package_fields():
    package = build_priced_package(AudienceType.ADULT, STARTERS, MAINS, DESSERTS, 10, "£")

    assert package.audience_type is AudienceType.ADULT
    assert package.starters == tuple(STARTERS)
    assert package.package_price == "£180"
    assert package.total_savings == "£20"
    assert package.discount_percentage == 10
