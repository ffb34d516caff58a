import logging
from typing import Optional, Dict, Any, List

from fastapi import UploadFile

from .core import (
    CatalogError, StorageError, ValidationError, NotFound,
    parse_number, _make_product_dict, with_public_image, shape_products
)
from .database import CategoryStore, AttachmentStore

# This file contains the core logic behind the catalog endpoints.
# Every operation re-reads the category document; nothing is cached between requests.

logger = logging.getLogger(__name__)


def _unexpected(op: str, exc: Exception) -> StorageError:
    logger.exception("%s failed", op)
    return StorageError("Internal server error", details=str(exc))


def _has_file(upload: Optional[UploadFile]) -> bool:
    return upload is not None and bool(upload.filename)


async def list_category_logic(store: CategoryStore, category: str, base_url: Optional[str] = None) -> List[Dict[str, Any]]:
    try:
        async with store.lock(category):
            products = store.load_category(category, create=True)
    except CatalogError:
        raise
    except Exception as e:
        raise _unexpected(f"GET /{category}", e) from e
    logger.info("found %d products in %s", len(products), category.lower())
    return shape_products(products, base_url)


async def create_product_logic(
    store: CategoryStore,
    attachments: AttachmentStore,
    category: str,
    name: Optional[str],
    price: Optional[str],
    volume: Optional[str] = None,
    image: Optional[UploadFile] = None,
    base_url: Optional[str] = None,
) -> Dict[str, Any]:
    if not name or not str(name).strip() or price is None or str(price).strip() == "":
        logger.warning("rejected POST /%s: missing required fields", category)
        raise ValidationError(
            "Name and price are required",
            details={"received": {"name": name, "price": price, "volume": volume}},
        )
    price_value = parse_number("price", price)
    volume_value = parse_number("volume", volume, default=0)
    # resolve before touching the uploads dir so a bad category stores nothing
    store.category_path(category)

    stored_name = None
    try:
        if _has_file(image):
            stored_name = attachments.save_attachment(image.filename, image.file)
        product = _make_product_dict(
            name=str(name),
            price=price_value,
            volume=volume_value,
            category=category,
            image=attachments.reference(stored_name) if stored_name else "",
        )

        async with store.lock(category):
            products = store.load_category(category)
            products.append(product)
            store.save_category(category, products)
    except CatalogError:
        if stored_name:
            attachments.delete_attachment(stored_name)
        raise
    except Exception as e:
        if stored_name:
            attachments.delete_attachment(stored_name)
        raise _unexpected(f"POST /{category}", e) from e

    logger.info("created product %s in %s", product["id"], product["category"])
    return with_public_image(product, base_url)


async def delete_product_logic(
    store: CategoryStore,
    attachments: AttachmentStore,
    category: str,
    product_id: str,
    base_url: Optional[str] = None,
) -> Dict[str, Any]:
    try:
        async with store.lock(category):
            if not store.exists(category):
                raise NotFound("Category not found", details={"category": category.lower()})
            products = store.load_category(category)

            index = next((i for i, p in enumerate(products) if p.get("id") == product_id), None)
            if index is None:
                raise NotFound("Product not found", details={"id": product_id})

            deleted = products.pop(index)
            store.save_category(category, products)
    except CatalogError:
        raise
    except Exception as e:
        raise _unexpected(f"DELETE /{category}/{product_id}", e) from e

    # attachment absence is not an error
    attachments.delete_attachment(deleted.get("image"))
    logger.info("deleted product %s from %s", product_id, category.lower())
    return with_public_image(deleted, base_url)
