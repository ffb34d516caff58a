#!/usr/bin/env python
from sdk.catalog_client import CatalogClient

def main():
    c = CatalogClient(base_url="http://127.0.0.1:5000")

    # -----------------------------
    # Service metadata
    # -----------------------------
    print("Service info...")
    print(c.info())
    print(c.health())

    # -----------------------------
    # Create a product
    # -----------------------------
    print("\nCreating product in 'face'...")
    serum = c.create_product("face", "Serum", 250, volume=30)
    print(serum)

    # -----------------------------
    # List the category
    # -----------------------------
    print("\nListing 'face'...")
    print(c.list_products("face"))

    # -----------------------------
    # Delete it again
    # -----------------------------
    print("\nDeleting product...")
    print(c.delete_product("face", serum["id"]))

    print("\nListing 'face' after delete...")
    print(c.list_products("face"))

if __name__ == "__main__":
    main()
