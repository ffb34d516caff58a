# sdk/catalog_client.py
import os
import requests
import httpx
from typing import Optional, Dict, Any, List


class CatalogClient:
    def __init__(self, base_url: str = "http://localhost:5000", timeout: int = 10, session=None):
        self.base_url = base_url.rstrip("/")
        # anything with requests-style get/post/delete works here (tests pass a TestClient)
        self.session = session if session is not None else requests.Session()
        self.timeout = timeout

    def _url(self, *parts: str) -> str:
        return "/".join([self.base_url] + [p.strip("/") for p in parts])

    # Service
    def info(self) -> Dict[str, Any]:
        r = self.session.get(self._url(""), timeout=self.timeout)
        r.raise_for_status()
        return r.json()

    def health(self) -> Dict[str, Any]:
        r = self.session.get(self._url("health"), timeout=self.timeout)
        r.raise_for_status()
        return r.json()

    # Catalog
    def list_products(self, category: str) -> List[Dict[str, Any]]:
        r = self.session.get(self._url(category), timeout=self.timeout)
        r.raise_for_status()
        return r.json()

    def create_product(self, category: str, name: str, price, volume=None, image_path: Optional[str] = None) -> Dict[str, Any]:
        data = {"name": name, "price": str(price)}
        if volume is not None:
            data["volume"] = str(volume)

        if image_path:
            with open(image_path, "rb") as fh:
                files = {"image": (os.path.basename(image_path), fh)}
                r = self.session.post(self._url(category), data=data, files=files, timeout=self.timeout)
        else:
            r = self.session.post(self._url(category), data=data, timeout=self.timeout)
        r.raise_for_status()
        return r.json()

    def delete_product(self, category: str, product_id: str) -> Dict[str, Any]:
        r = self.session.delete(self._url(category, product_id), timeout=self.timeout)
        r.raise_for_status()
        return r.json()

    def download_image(self, image: str) -> bytes:
        # accepts either the stored "/uploads/<name>" reference or an absolute URL
        url = image if image.startswith(("http://", "https://")) else self._url(image)
        r = self.session.get(url, timeout=self.timeout)
        r.raise_for_status()
        return r.content

    # Async create (used by the concurrent demo)
    async def create_product_async(self, category: str, name: str, price, volume=None):
        data = {"name": name, "price": str(price)}
        if volume is not None:
            data["volume"] = str(volume)
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            r = await client.post(self._url(category), data=data)
            return r


if __name__ == "__main__":
    import argparse
    from rich import print

    parser = argparse.ArgumentParser(description="Catalog CLI")
    parser.add_argument("--base-url", default=os.getenv("CATALOG_URL", "http://127.0.0.1:5000"))
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("info", help="Show service metadata")
    subparsers.add_parser("health", help="Check service health")

    lp = subparsers.add_parser("list", help="List products in a category")
    lp.add_argument("category")

    cp = subparsers.add_parser("create", help="Create a product")
    cp.add_argument("category")
    cp.add_argument("--name", required=True, help="Product name")
    cp.add_argument("--price", required=True, help="Product price")
    cp.add_argument("--volume", help="Optional volume")
    cp.add_argument("--image", help="Path to an image to upload")

    dp = subparsers.add_parser("delete", help="Delete a product")
    dp.add_argument("category")
    dp.add_argument("product_id")

    args = parser.parse_args()
    c = CatalogClient(base_url=args.base_url)

    if args.command == "info":
        print(c.info())
    elif args.command == "health":
        print(c.health())
    elif args.command == "list":
        print(c.list_products(args.category))
    elif args.command == "create":
        print(c.create_product(args.category, args.name, args.price, args.volume, args.image))
    elif args.command == "delete":
        print(c.delete_product(args.category, args.product_id))
