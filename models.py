from pydantic import BaseModel, Field, field_validator, ConfigDict
from typing import Optional, List, Dict, Any, Union

# Prices keep the JSON number type the API sent (no rounding, no conversion).
Numeric = Union[int, float]


def _coerce_id(value: Any) -> str:
    text = str(value if value is not None else "").strip()
    if not text:
        raise ValueError("resource id must not be empty")
    return text


class ApiErrorObject(BaseModel):
    model_config = ConfigDict(extra='ignore')

    title: str = ""
    detail: str = ""


class ApiMeta(BaseModel):
    model_config = ConfigDict(extra='ignore')

    total: Optional[int] = None


class ApiDocument(BaseModel):
    """A decoded JSON:API response body."""

    model_config = ConfigDict(extra='ignore')

    data: List[Dict[str, Any]] = []
    included: List[Dict[str, Any]] = []
    meta: Optional[ApiMeta] = None
    errors: List[ApiErrorObject] = []

    @field_validator("data", "included", "errors", mode="before")
    @classmethod
    def _as_list(cls, value: Any) -> List[Any]:
        if value is None:
            return []
        if isinstance(value, dict):
            return [value]
        return value

    @property
    def total(self) -> Optional[int]:
        return self.meta.total if self.meta else None

    def included_of_type(self, resource_type: str) -> List[Dict[str, Any]]:
        return [item for item in self.included if item.get("type") == resource_type]


class MerchantAttributes(BaseModel):
    model_config = ConfigDict(extra='allow')

    name: str = ""
    url: Optional[str] = None
    active: Optional[bool] = None


class Merchant(BaseModel):
    id: str
    attributes: MerchantAttributes = Field(default_factory=MerchantAttributes)

    @field_validator("id", mode="before")
    @classmethod
    def _normalize_id(cls, value: Any) -> str:
        return _coerce_id(value)

    @property
    def name(self) -> str:
        return self.attributes.name

    @classmethod
    def from_resource(cls, resource: Dict[str, Any]) -> "Merchant":
        return cls(id=resource.get("id"), attributes=resource.get("attributes") or {})


class OfferAttributes(BaseModel):
    model_config = ConfigDict(extra='allow', frozen=True)

    description: Optional[str] = None
    price: Optional[Numeric] = None
    currency: Optional[str] = None
    deeplink: Optional[str] = None


class Offer(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    merchantId: str
    attributes: OfferAttributes = Field(default_factory=OfferAttributes)

    @field_validator("id", "merchantId", mode="before")
    @classmethod
    def _normalize_ids(cls, value: Any) -> str:
        return _coerce_id(value)

    @property
    def price(self) -> Optional[Numeric]:
        return self.attributes.price

    @property
    def currency(self) -> Optional[str]:
        return self.attributes.currency

    @classmethod
    def from_resource(cls, resource: Dict[str, Any]) -> "Offer":
        """Build an offer from a JSON:API offer record.

        The merchant relationship is delivered as a one-element list by the
        cheapest_offers endpoint; a plain resource identifier is accepted too.
        """
        relationship = ((resource.get("relationships") or {}).get("merchant") or {}).get("data")
        if isinstance(relationship, list):
            relationship = relationship[0] if relationship else None
        merchant_id = relationship.get("id") if isinstance(relationship, dict) else None
        return cls(
            id=resource.get("id"),
            merchantId=merchant_id,
            attributes=resource.get("attributes") or {},
        )


class ProductAttributes(BaseModel):
    model_config = ConfigDict(extra='allow')

    name: Optional[str] = None
    fullName: Optional[str] = None
    asin: List[str] = []
    gtins: List[str] = []
    priceMin: Optional[Numeric] = None
    priceMax: Optional[Numeric] = None

    @field_validator("asin", "gtins", mode="before")
    @classmethod
    def _as_string_list(cls, value: Any) -> List[str]:
        if value is None:
            return []
        if isinstance(value, (str, int)):
            return [str(value)]
        return [str(item) for item in value]


class Product(BaseModel):
    id: str
    attributes: ProductAttributes = Field(default_factory=ProductAttributes)
    offers: Dict[str, Offer] = Field(default_factory=dict)
    merchants: Dict[str, Merchant] = Field(default_factory=dict)

    @field_validator("id", mode="before")
    @classmethod
    def _normalize_id(cls, value: Any) -> str:
        return _coerce_id(value)

    @classmethod
    def from_resource(cls, resource: Dict[str, Any]) -> "Product":
        return cls(id=resource.get("id"), attributes=resource.get("attributes") or {})

