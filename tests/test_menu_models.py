import json

import pydantic
import pytest

from menu_packager.errors import UnknownAudienceTypeError
from menu_packager.models.menu_models import (
    AUDIENCE_PROFILES,
    AudienceType,
    MenuData,
    MenuItem,
    PricedPackage,
)


def test_every_audience_has_a_profile():
    assert set(AUDIENCE_PROFILES) == set(AudienceType)


@pytest.mark.parametrize("audience, counts", [
    (AudienceType.ADULT, (2, 1, 1)),
    (AudienceType.KIDS, (1, 1, 1)),
    (AudienceType.FAMILY, (2, 2, 1)),
])
def test_selection_counts(audience, counts):
    profile = audience.profile
    assert (profile.starter_count, profile.main_count, profile.dessert_count) == counts


def test_parse_audience():
    assert AudienceType.parse("kids") is AudienceType.KIDS
    assert AudienceType.parse(" Family ") is AudienceType.FAMILY
    assert AudienceType.parse(AudienceType.ADULT) is AudienceType.ADULT


def test_unknown_audience_raises():
    with pytest.raises(UnknownAudienceTypeError):
        AudienceType.parse("teenagers")


def test_menu_item_name_required():
    with pytest.raises(pydantic.ValidationError):
        MenuItem(name="   ", price="£5")


def test_numeric_price_becomes_text():
    assert MenuItem(name="Soup", price=4.5).price == "4.5"
    assert MenuItem(name="Soup", price=None).price == "N/A"


def make_package(**overrides):
    fields = dict(
        audience_type=AudienceType.KIDS,
        starters=[MenuItem(name="Fries", price="£3")],
        mains=[MenuItem(name="Burger", price="£7")],
        desserts=[],
        package_price="£9",
        total_savings="£1",
        discount_percentage=10,
    )
    fields.update(overrides)
    return PricedPackage(**fields)


def test_json_payload_uses_camel_case():
    payload = make_package().to_json_dict()

    assert payload == {
        "audienceType": "kids",
        "starters": [{"name": "Fries", "price": "£3"}],
        "mains": [{"name": "Burger", "price": "£7"}],
        "desserts": [],
        "packagePrice": "£9",
        "totalSavings": "£1",
        "discountPercentage": 10,
    }


def test_whole_discount_serializes_without_fraction():
    text = json.dumps(make_package(discount_percentage=10).to_json_dict())

    assert '"discountPercentage": 10' in text
    assert '"discountPercentage": 10.0' not in text


def test_fractional_discount_kept():
    assert make_package(discount_percentage=12.5).to_json_dict()["discountPercentage"] == 12.5


def test_absent_savings_are_left_out():
    payload = make_package(total_savings=None).to_json_dict()

    assert "totalSavings" not in payload


def test_discount_out_of_range_rejected():
    with pytest.raises(pydantic.ValidationError):
        make_package(discount_percentage=120)


def test_menu_data_to_dataframe():
    data = MenuData(
        source="menu.txt",
        items=[MenuItem(name="Soup", price="£4"), MenuItem(name="Cake", price="£6")],
        total_items=2,
    )

    df = data.to_dataframe()

    assert list(df.columns) == ["name", "price"]
    assert df["name"].tolist() == ["Soup", "Cake"]
