import math
import uuid
from datetime import datetime, timezone
from typing import Optional, Dict, Any, List, Union

# Error taxonomy and the small helpers shared by the catalog operations.

Number = Union[int, float]


class CatalogError(Exception):
    status_code = 500

    def __init__(self, message: str, details: Any = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {"error": self.message}
        if self.details is not None:
            body["details"] = self.details
        return body


class ValidationError(CatalogError):
    status_code = 400


class NotFound(CatalogError):
    status_code = 404


class PayloadTooLarge(CatalogError):
    status_code = 413


class StorageError(CatalogError):
    status_code = 500


class ReadError(StorageError):
    """The category document exists but does not hold a JSON array."""


def parse_number(field: str, raw: Optional[str], default: Optional[Number] = None) -> Number:
    """
    Parse form text into an int when integral, else a float.
    Empty input falls back to `default`; anything non-numeric is a ValidationError.
    """
    if raw is None or str(raw).strip() == "":
        if default is None:
            raise ValidationError(f"{field} is required")
        return default
    text = str(raw).strip()
    try:
        value = float(text)
    except ValueError:
        raise ValidationError(f"{field} must be a number", details={field: raw})
    if not math.isfinite(value):
        raise ValidationError(f"{field} must be a finite number", details={field: raw})
    if value.is_integer():
        return int(value)
    return value


def _make_product_dict(name: str, price: Number, volume: Number, category: str, image: str) -> Dict[str, Any]:
    return {
        "id": str(uuid.uuid4()),
        "name": name,
        "price": price,
        "volume": volume,
        "category": category.lower(),
        "image": image,
        "createdAt": datetime.now(timezone.utc).isoformat(),
    }


def with_public_image(product: Dict[str, Any], base_url: Optional[str]) -> Dict[str, Any]:
    # Stored records keep the relative reference; only the response copy changes.
    image = product.get("image") or ""
    if not base_url or not image or image.startswith(("http://", "https://")):
        return product
    shaped = dict(product)
    shaped["image"] = base_url.rstrip("/") + "/" + image.lstrip("/")
    return shaped


def shape_products(products: List[Dict[str, Any]], base_url: Optional[str]) -> List[Dict[str, Any]]:
    return [with_public_image(p, base_url) for p in products]
