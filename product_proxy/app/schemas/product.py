from decimal import Decimal
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator


class ProductData(BaseModel):
    """Nested attribute block of a product, named as upstream names it"""

    model_config = ConfigDict(populate_by_name=True)

    year: int = 0
    price: Decimal = Decimal("0")
    cpu_model: Optional[str] = Field(None, alias="CPU_model")
    hard_disk_size: Optional[str] = Field(None, alias="Hard_disk_size")

    @field_serializer("price")
    def serialize_price(self, price: Decimal) -> float:
        return float(price)


class Product(BaseModel):
    """Product resource as exchanged with clients and with upstream"""

    model_config = ConfigDict(populate_by_name=True)

    id: Optional[str] = Field(None, description="Assigned by upstream on create")
    name: str = ""
    data: ProductData = Field(default_factory=ProductData)

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, v):
        if v is None or isinstance(v, str):
            return v
        return str(v)

    @field_validator("name", mode="before")
    @classmethod
    def default_name(cls, v):
        return "" if v is None else v

    @field_validator("data", mode="before")
    @classmethod
    def default_data(cls, v):
        # upstream stores some objects with "data": null
        return {} if v is None else v

    def to_upstream_payload(self) -> Dict[str, Any]:
        """JSON body for upstream, absent fields omitted"""
        return self.model_dump(by_alias=True, exclude_none=True)
