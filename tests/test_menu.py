import pytest

from bistro.core.exceptions import NotFound, ValidationError
from bistro.models import FoodType, MenuCategory
from bistro.schemas import MenuItemUpdate
from bistro.services.catalog import CatalogService

from conftest import add_menu_item, make_item


async def test_list_by_type_validates_and_hides_unavailable(db):
    await make_item(db, "Burger")
    await make_item(db, "Hidden Burger", available=False)
    service = CatalogService(db)

    items = await service.list_by_type("non-veg")

    assert [i.name for i in items] == ["Burger"]
    with pytest.raises(ValidationError):
        await service.list_by_type("vegan")


async def test_search_is_case_insensitive_on_name_and_description(db):
    await make_item(db, "Cheese Burger")
    await make_item(db, "Cola")
    service = CatalogService(db)

    assert [i.name for i in await service.list_items(search="cheese")] == ["Cheese Burger"]
    assert [i.name for i in await service.list_items(search="TASTY COLA")] == ["Cola"]


async def test_search_treats_wildcards_literally(db):
    await make_item(db, "Burger")
    assert await CatalogService(db).list_items(search="%") == []


async def test_partial_update_keeps_other_fields_and_rating(db):
    item = await make_item(db, "Burger", 150)
    item.rating = 4.5
    item.num_reviews = 2
    await db.commit()

    updated = await CatalogService(db).update_item(item.id, MenuItemUpdate(price=175))

    assert updated.price == 175
    assert updated.name == "Burger"
    assert updated.rating == 4.5
    assert updated.num_reviews == 2


async def test_missing_item_operations(db):
    service = CatalogService(db)
    with pytest.raises(NotFound):
        await service.get_item(1)
    with pytest.raises(NotFound):
        await service.update_item(1, MenuItemUpdate(price=1))
    with pytest.raises(NotFound):
        await service.delete_item(1)
    with pytest.raises(NotFound):
        await service.toggle_availability(1)


# =============================================================================
# HTTP
# =============================================================================

async def test_public_listing_with_filters(client, admin_headers):
    await add_menu_item(client, admin_headers, "Margherita", 249, category="Pizza", type="veg")
    await add_menu_item(client, admin_headers, "Chicken Burger", 199)

    everything = await client.get("/api/menu")
    assert everything.status_code == 200
    assert everything.json()["count"] == 2
    assert [i["name"] for i in everything.json()["data"]] == ["Chicken Burger", "Margherita"]

    pizzas = await client.get("/api/menu", params={"category": "Pizza"})
    assert [i["name"] for i in pizzas.json()["data"]] == ["Margherita"]

    veg = await client.get("/api/menu", params={"type": "veg"})
    assert [i["name"] for i in veg.json()["data"]] == ["Margherita"]

    search = await client.get("/api/menu", params={"search": "chicken"})
    assert [i["name"] for i in search.json()["data"]] == ["Chicken Burger"]


async def test_type_route(client, admin_headers):
    await add_menu_item(client, admin_headers, "Margherita", 249, category="Pizza", type="veg")

    ok = await client.get("/api/menu/type/veg")
    assert ok.json()["count"] == 1

    bad = await client.get("/api/menu/type/vegan")
    assert bad.status_code == 400
    assert bad.json()["message"] == 'Invalid type. Must be "veg" or "non-veg"'


async def test_created_item_defaults(client, admin_headers):
    item = await add_menu_item(client, admin_headers, "Burger", 150, tags=["spicy"])

    assert item["isAvailable"] is True
    assert item["rating"] == 0
    assert item["numReviews"] == 0
    assert item["image"] == "default-food.jpg"
    assert item["preparationTime"] == 20
    assert item["tags"] == ["spicy"]


async def test_write_operations_are_admin_only(client, admin_headers, user_headers):
    item = await add_menu_item(client, admin_headers)
    body = {"name": "X", "description": "Y", "category": "Pizza", "type": "veg", "price": 1}

    assert (await client.post("/api/menu", json=body)).status_code == 401
    assert (await client.post("/api/menu", json=body, headers=user_headers)).status_code == 403
    assert (await client.put(f"/api/menu/{item['id']}", json={"price": 1}, headers=user_headers)).status_code == 403
    assert (await client.delete(f"/api/menu/{item['id']}", headers=user_headers)).status_code == 403
    assert (await client.patch(f"/api/menu/{item['id']}/availability", headers=user_headers)).status_code == 403


async def test_invalid_item_payloads(client, admin_headers):
    base = {"name": "X", "description": "Y", "category": "Pizza", "type": "veg", "price": 1}

    for override in ({"price": -1}, {"category": "Sushi"}, {"type": "vegan"}, {"name": "n" * 101}):
        response = await client.post("/api/menu", json={**base, **override}, headers=admin_headers)
        assert response.status_code == 400, override


async def test_update_delete_and_toggle(client, admin_headers):
    item = await add_menu_item(client, admin_headers, "Burger", 150)
    url = f"/api/menu/{item['id']}"

    updated = await client.put(url, json={"price": 175, "rating": 5}, headers=admin_headers)
    assert updated.status_code == 200
    assert updated.json()["data"]["price"] == 175
    assert updated.json()["data"]["rating"] == 0

    toggled = await client.patch(f"{url}/availability", headers=admin_headers)
    assert toggled.json()["message"] == "Menu item disabled successfully"
    assert toggled.json()["data"]["isAvailable"] is False

    toggled = await client.patch(f"{url}/availability", headers=admin_headers)
    assert toggled.json()["message"] == "Menu item enabled successfully"

    deleted = await client.delete(url, headers=admin_headers)
    assert deleted.status_code == 200
    assert (await client.get(url)).status_code == 404
    assert (await client.put(url, json={"price": 1}, headers=admin_headers)).status_code == 404
    assert (await client.delete(url, headers=admin_headers)).status_code == 404


def test_enum_values_round_trip():
    assert MenuCategory("Fast Food") is MenuCategory.FAST_FOOD
    assert FoodType("non-veg") is FoodType.NON_VEG
