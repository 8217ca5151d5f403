"""Value objects for the collection domain.

Enumerations and small immutable records that describe a collection
without taking part in membership resolution.
"""

from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any, Self

from marketplace.domain.base import ValueObject
from marketplace.domain.exceptions import CollectionValidationError


class CollectionType(str, Enum):
    """How a collection's membership is determined."""

    MANUAL = "manual"
    SMART = "smart"


class SortOrder(str, Enum):
    """Display order hint for storefront listings.

    Advisory only: resolution never consults it.
    """

    MANUAL = "manual"
    PRICE_ASC = "price_asc"
    PRICE_DESC = "price_desc"
    NEWEST = "newest"
    OLDEST = "oldest"
    BEST_SELLING = "best_selling"
    NAME_ASC = "name_asc"
    NAME_DESC = "name_desc"
    FEATURED = "featured"


@dataclass(frozen=True)
class Visibility(ValueObject):
    """Channels a collection is shown on."""

    storefront: bool = True
    mobile_app: bool = True

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> Self:
        """Build visibility flags, defaulting absent channels to visible."""
        data = data or {}
        return cls(
            storefront=bool(data.get("storefront", True)),
            mobile_app=bool(data.get("mobile_app", True)),
        )

    def to_dict(self) -> dict[str, bool]:
        """Convert to dictionary."""
        return asdict(self)


@dataclass(frozen=True)
class Placement(ValueObject):
    """Storefront slots a collection is promoted in."""

    homepage_banner: bool = False
    homepage_featured: bool = False
    homepage_tabs: bool = False
    category_page: bool = False
    navigation_menu: bool = False

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> Self:
        """Build placement flags, defaulting absent slots to off."""
        data = data or {}
        return cls(**{name: bool(data.get(name, False)) for name in cls.__dataclass_fields__})

    def to_dict(self) -> dict[str, bool]:
        """Convert to dictionary."""
        return asdict(self)


def parse_enum(enum_cls: type[Enum], value: Any, field: str) -> Any:
    """Coerce a raw value into ``enum_cls``.

    Args:
        enum_cls: Target enumeration.
        value: Raw value (member or member value).
        field: Field name used in the error.

    Returns:
        Enumeration member.

    Raises:
        CollectionValidationError: If the value is not a member.
    """
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError:
        allowed = [member.value for member in enum_cls]
        raise CollectionValidationError(field, f"must be one of {allowed}") from None
