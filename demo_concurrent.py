import asyncio
from sdk.catalog_client import CatalogClient

CATEGORY = "body"

async def create(client, i):
    r = await client.create_product_async(CATEGORY, f"Lotion #{i}", 100 + i, volume=200)
    if r.status_code == 201:
        print(f"✅ created {r.json()['name']} ({r.json()['id']})")
    else:
        print(f"❌ create #{i} failed: {r.status_code} {r.text}")
    return r

async def main():
    c = CatalogClient(base_url="http://127.0.0.1:5000")

    before = {p["id"] for p in c.list_products(CATEGORY)}
    print(f"\n📦 {len(before)} products in '{CATEGORY}' before")

    print("\n⚡ Creating 10 products concurrently...")
    results = await asyncio.gather(*(create(c, i) for i in range(10)))
    created = {r.json()["id"] for r in results if r.status_code == 201}

    after = {p["id"] for p in c.list_products(CATEGORY)}
    missing = created - after
    if missing:
        print(f"\n⚠️  {len(missing)} created products were lost: {sorted(missing)}")
    else:
        print(f"\n📦 all {len(created)} created products persisted ({len(after)} total)")

    # Clean up
    for pid in created & after:
        c.delete_product(CATEGORY, pid)

if __name__ == "__main__":
    asyncio.run(main())
