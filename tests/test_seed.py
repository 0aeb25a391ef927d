import asyncio

from shop_service.db.database import SessionLocal
from shop_service.security import PasswordEncoder
from shop_service.seed import seed_data


async def run_seed():
    async with SessionLocal() as db:
        await seed_data(db, PasswordEncoder(rounds=4))


def test_seed_is_idempotent(client):
    asyncio.run(run_seed())
    asyncio.run(run_seed())

    users = client.get("/api/users").json()
    categories = client.get("/api/categories").json()
    products = client.get("/api/products", params={"sort": "name"}).json()

    assert [u["email"] for u in users] == ["client@myshop.test"]
    assert [c["name"] for c in categories] == ["Electronique"]
    assert [p["name"] for p in products] == ["Casque Bluetooth", "Laptop 14"]
    assert [p["stock_quantity"] for p in products] == [25, 10]
