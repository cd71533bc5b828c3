"""
Product Domain Model

Represents a jewelry product as the storefront stores it. Documents use
camelCase field names; the models accept either spelling and dump camelCase.
"""
import re
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from gleaming_admin.core.config import settings

Availability = Literal["READY TO SHIP", "MADE TO ORDER"]
MetalType = Literal["gold", "silver"]

READY_TO_SHIP = "READY TO SHIP"
MADE_TO_ORDER = "MADE TO ORDER"
AVAILABILITY_OPTIONS = (READY_TO_SHIP, MADE_TO_ORDER)
METAL_TYPES = ("gold", "silver")

PRODUCT_CATEGORIES = [
    "Rings",
    "Earrings",
    "Necklaces",
    "Pendants",
    "Chains",
    "Bracelets",
    "Bangles",
    "Anklets",
    "Nose Pins",
    "Mangalsutra",
    "Sets",
    "Coins",
]

_URL_PATTERN = re.compile(r'https?://[^\s"<>]+')


def material_for(metal_type: str) -> str:
    return "Gold" if metal_type == "gold" else "Silver"


def split_lines(value) -> List[str]:
    """Split a newline separated string (or pass a list through), dropping blanks"""
    if value is None:
        return []
    if isinstance(value, str):
        value = value.split("\n")
    return [str(item).strip() for item in value if str(item).strip()]


def split_commas(value) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        value = value.split(",")
    return [str(item).strip() for item in value if str(item).strip()]


class Product(BaseModel):
    """
    Product domain model - a catalog product

    Fields:
        id: Document id
        name / description / category: Catalog text
        price: Unit price (0 when the price is quoted on request)
        image_urls: Hosted image URLs, first one is the thumbnail
        availability: READY TO SHIP or MADE TO ORDER
        type: gold or silver
        material: Gold or Silver (derived from type)
        sizes: Available sizes
        stock_quantity: Units on hand; None when never tracked
        is_bestseller: Mirrored into the bestsellers collection when true
        price_on_request: Storefront shows "query for rate" instead of a price
        slug: URL slug (set by bulk uploads)
    """

    id: str = Field(..., description="Document id")
    name: str = Field("", description="Product name")
    description: str = Field("", description="Product description")
    price: float = Field(0, description="Unit price")
    category: str = Field("", description="Product category")
    image_urls: List[str] = Field(default_factory=list, description="Image URLs")
    availability: str = Field(READY_TO_SHIP, description="READY TO SHIP or MADE TO ORDER")
    type: Optional[str] = Field(None, description="gold or silver")
    material: Optional[str] = Field(None, description="Gold or Silver")
    sizes: List[str] = Field(default_factory=list, description="Available sizes")
    stock_quantity: Optional[int] = Field(None, description="Units on hand")
    is_bestseller: bool = Field(False, description="Flagged as bestseller")
    price_on_request: bool = Field(False, description="Price shown on request")
    slug: Optional[str] = Field(None, description="URL slug")

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )

    @property
    def display_image_url(self) -> str:
        """First http(s) URL found in the first image entry, or a placeholder"""
        if not self.image_urls:
            return settings.PLACEHOLDER_IMAGE_URL
        first = self.image_urls[0]
        if not first or not isinstance(first, str):
            return settings.PLACEHOLDER_IMAGE_URL
        match = _URL_PATTERN.search(first)
        return match.group(0) if match else settings.PLACEHOLDER_IMAGE_URL

    @property
    def is_low_stock(self) -> bool:
        return self.stock_quantity is not None and self.stock_quantity < settings.LOW_STOCK_THRESHOLD

    def to_dict(self) -> dict:
        """Convert to dictionary with computed fields"""
        data = self.model_dump()
        data['display_image_url'] = self.display_image_url
        data['is_low_stock'] = self.is_low_stock
        return data


class ProductInput(BaseModel):
    """
    Schema for creating or editing a product

    image_urls accepts a list or the newline separated text of the admin form;
    sizes accepts a list or comma separated text.
    """

    type: MetalType
    name: str = Field(..., min_length=1)
    description: str = Field(..., min_length=1)
    price: float = Field(0, ge=0)
    category: str = Field(..., min_length=1)
    image_urls: List[str] = Field(..., min_length=1)
    availability: Availability = READY_TO_SHIP
    sizes: List[str] = Field(default_factory=list)
    stock_quantity: int = Field(0, ge=0)
    is_bestseller: bool = False
    price_on_request: Optional[bool] = None

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
    )

    @field_validator("image_urls", mode="before")
    @classmethod
    def _split_image_urls(cls, value):
        return split_lines(value)

    @field_validator("sizes", mode="before")
    @classmethod
    def _split_sizes(cls, value):
        return split_commas(value)

    @model_validator(mode="after")
    def _check_price(self):
        # Unset means the metal's default: gold is quoted on request
        if self.price_on_request is None:
            self.price_on_request = self.type == "gold"
        if not self.price_on_request and self.price <= 0:
            raise ValueError("Price must be positive unless 'Query for Rate' is enabled")
        return self

    def to_document(self) -> dict:
        """Document written to the products collection"""
        return {
            "name": self.name,
            "description": self.description,
            "price": self.price,
            "category": self.category,
            "imageUrls": self.image_urls,
            "availability": self.availability,
            "type": self.type,
            "sizes": self.sizes,
            "stockQuantity": 0 if self.availability == MADE_TO_ORDER else self.stock_quantity,
            "isBestseller": self.is_bestseller,
            "priceOnRequest": self.price_on_request,
            "material": material_for(self.type),
        }
