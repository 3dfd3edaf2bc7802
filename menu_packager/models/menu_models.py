from enum import Enum
from dataclasses import dataclass
from typing import Optional, List, Tuple, Dict, Any, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from menu_packager.errors import UnknownAudienceTypeError

NOT_AVAILABLE = "N/A"
UNKNOWN_ITEM = "Unknown item"


class MenuItem(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=1)
    price: str = NOT_AVAILABLE

    @field_validator("name", mode="before")
    @classmethod
    def _strip_name(cls, value):
        if isinstance(value, str):
            return value.strip()
        return value

    @field_validator("price", mode="before")
    @classmethod
    def _price_as_text(cls, value):
        # the AI sometimes answers with bare numbers
        if value is None:
            return NOT_AVAILABLE
        if isinstance(value, (int, float)):
            return str(value)
        if isinstance(value, str):
            return value.strip() or NOT_AVAILABLE
        return value


class MenuData(BaseModel):
    source: str
    items: List[MenuItem]
    total_items: int
    currency: Optional[str] = None

    def to_dataframe(self):
        import pandas as pd
        rows = [it.model_dump() for it in self.items]
        return pd.DataFrame(rows, columns=["name", "price"])


# --------------------------------------------------
# AUDIENCE
# --------------------------------------------------

class AudienceType(str, Enum):
    ADULT = "adult"
    KIDS = "kids"
    FAMILY = "family"

    @classmethod
    def parse(cls, value) -> "AudienceType":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            valid = ", ".join(member.value for member in cls)
            raise UnknownAudienceTypeError(
                f"Unknown audience type: {value!r}. Expected one of: {valid}"
            ) from None

    @property
    def profile(self) -> "AudienceProfile":
        return AUDIENCE_PROFILES[self]


@dataclass(frozen=True)
class AudienceProfile:
    """Selection guidance handed to the AI for one audience."""

    label: str
    preferences: str
    avoid: str
    starter_count: int
    main_count: int
    dessert_count: int


AUDIENCE_PROFILES: Dict[AudienceType, AudienceProfile] = {
    AudienceType.ADULT: AudienceProfile(
        label="Adult",
        preferences="sophisticated dishes, balanced flavors, may include alcoholic options",
        avoid="overly childish presentations, extremely spicy or unusual flavors unless specifically preferred by adults",
        starter_count=2,
        main_count=1,
        dessert_count=1,
    ),
    AudienceType.KIDS: AudienceProfile(
        label="Kids",
        preferences="fun presentations, mild flavors, familiar foods, smaller portions",
        avoid="spicy foods, alcoholic ingredients, overly complex dishes, bitter foods",
        starter_count=1,
        main_count=1,
        dessert_count=1,
    ),
    AudienceType.FAMILY: AudienceProfile(
        label="Family",
        preferences="variety of options that appeal to both adults and children, sharable dishes, comfort foods",
        avoid="extremely niche or polarizing flavors, overly fancy presentations",
        starter_count=2,
        main_count=2,
        dessert_count=1,
    ),
}

_missing = set(AudienceType) - set(AUDIENCE_PROFILES)
if _missing:
    raise RuntimeError(f"Audience types without a profile: {sorted(m.value for m in _missing)}")


# --------------------------------------------------
# PACKAGE
# --------------------------------------------------

class PackageSelection(BaseModel):
    """Courses chosen by the AI, before pricing."""

    model_config = ConfigDict(frozen=True)

    starters: Tuple[MenuItem, ...] = ()
    mains: Tuple[MenuItem, ...] = ()
    desserts: Tuple[MenuItem, ...] = ()


class PricedPackage(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    audience_type: AudienceType = Field(alias="audienceType")
    starters: Tuple[MenuItem, ...]
    mains: Tuple[MenuItem, ...]
    desserts: Tuple[MenuItem, ...]
    package_price: str = Field(alias="packagePrice")
    total_savings: Optional[str] = Field(default=None, alias="totalSavings")
    discount_percentage: Union[int, float] = Field(alias="discountPercentage", ge=0, le=100)

    def to_json_dict(self) -> Dict[str, Any]:
        """camelCase payload; totalSavings is left out when there are none."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
