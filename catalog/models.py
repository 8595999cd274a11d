"""Product records in their two encodings.

``WireProduct`` is what the REST API sends and accepts (``item`` for the
display name, ``available`` as 0/1). ``Product`` is the canonical shape the
rest of the client works with.
"""

from __future__ import annotations

from decimal import Decimal, ROUND_HALF_UP

from pydantic import BaseModel, ConfigDict, Field, computed_field


def calculate_final_price(price: int, discount: int) -> int:
    """Price after ``discount`` percent, rounded half-up to whole minor units."""
    exact = Decimal(price) * (100 - Decimal(discount)) / 100
    return int(exact.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


class WireProduct(BaseModel):
    """Product as exchanged with the backend."""

    model_config = ConfigDict(extra="ignore")

    barcode: str = Field(default="", description="Product barcode (unique identifier)")
    item: str = Field(default="", description="Product name")
    category: str = Field(default="", description="Product category")
    price: int = Field(default=0, description="Price in cents")
    discount: int = Field(default=0, description="Discount percentage")
    available: int = Field(default=0, description="Availability flag (0 or 1)")


class Product(BaseModel):
    """Canonical product record.

    Instances are frozen; the store replaces records instead of editing them.
    """

    model_config = ConfigDict(frozen=True)

    barcode: str = Field(default="", description="Product barcode (unique identifier)")
    name: str = Field(default="", description="Display name")
    category: str = Field(default="", description="Product category")
    price: int = Field(default=0, ge=0, description="Price in cents")
    discount: int = Field(default=0, ge=0, le=100, description="Discount percentage")
    available: bool = Field(default=False, description="Whether the product can be ordered")

    @computed_field  # type: ignore[prop-decorator]
    @property
    def final_price(self) -> int:
        return calculate_final_price(self.price, self.discount)
