import pytest

from recipe_catalog.config import Settings, get_settings
from recipe_catalog.main import app


RECIPE = {
    "title": "Toast",
    "time_minutes": 5,
    "price": "1.50",
    "link": "http://example.com/toast",
    "description": "Toast the bread.",
    "ingredients": [{"id": 1, "name": "Spaghetti", "amount": "2", "unit": "slices"}],
    "tags": [{"id": 2, "name": "Quick"}],
}


@pytest.mark.asyncio
async def test_api_overview(client):
    response = await client.get("/api")
    assert response.status_code == 200
    data = response.json()
    assert len(data) == 10
    assert data["create_user_url"] == "http://localhost:3000/api/user/create/"
    assert data["recipes_url"] == "http://localhost:3000/api/recipe/recipes/{?ingredients,tags}"
    assert data["tags_url"] == "http://localhost:3000/api/recipe/tags/{?assigned_only}"


@pytest.mark.asyncio
async def test_list_recipes_empty(client):
    response = await client.get("/api/recipe/recipes/")
    assert response.status_code == 200
    assert response.json() == []


@pytest.mark.asyncio
async def test_list_recipes_full(client, seeded):
    response = await client.get("/api/recipe/recipes/")
    assert response.status_code == 200
    data = response.json()
    assert len(data) == 4
    carbonara = next(r for r in data if r["title"] == "Spaghetti Carbonara")
    assert carbonara["time_minutes"] == 25
    assert carbonara["price"] == "12.50"
    assert carbonara["description"].startswith("Step 1:")
    assert len(carbonara["ingredients"]) == 6
    assert set(carbonara["ingredients"][0]) == {"id", "name", "amount", "unit"}
    assert {t["name"] for t in carbonara["tags"]} == {"Italian", "Dinner"}


@pytest.mark.asyncio
async def test_list_recipes_filtered(client, seeded):
    tags = {t["name"]: t["id"] for t in (await client.get("/api/recipe/tags/")).json()}
    ingredients = {i["name"]: i["id"] for i in (await client.get("/api/recipe/ingredients/")).json()}

    response = await client.get("/api/recipe/recipes/", params={"tags": str(tags["Seafood"])})
    assert [r["title"] for r in response.json()] == ["Garlic Butter Salmon"]

    response = await client.get(
        "/api/recipe/recipes/",
        params={"ingredients": f"{ingredients['Eggs']},{ingredients['Dill']}"},
    )
    assert {r["title"] for r in response.json()} == {
        "Spaghetti Carbonara",
        "Chicken Parmesan",
        "Garlic Butter Salmon",
    }

    response = await client.get(
        "/api/recipe/recipes/",
        params={"ingredients": str(ingredients["Eggs"]), "tags": str(tags["Quick"])},
    )
    assert response.json() == []


@pytest.mark.asyncio
async def test_list_recipes_rejects_bad_filter(client):
    response = await client.get("/api/recipe/recipes/", params={"tags": "one,two"})
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_create_recipe_echoes_but_does_not_store_links(client, seeded):
    response = await client.post("/api/recipe/recipes/", json=RECIPE)
    assert response.status_code == 201
    data = response.json()
    assert data["id"] == 5
    assert data["ingredients"] == RECIPE["ingredients"]
    assert data["tags"] == RECIPE["tags"]

    listed = (await client.get("/api/recipe/recipes/")).json()
    assert len(listed) == 5
    stored = next(r for r in listed if r["id"] == data["id"])
    assert stored["ingredients"] == []
    assert stored["tags"] == []


@pytest.mark.asyncio
async def test_create_recipe_stores_links_when_enabled(client, seeded):
    app.dependency_overrides[get_settings] = lambda: Settings(persist_recipe_associations=True)

    response = await client.post("/api/recipe/recipes/", json=RECIPE)
    assert response.status_code == 201

    listed = (await client.get("/api/recipe/recipes/")).json()
    stored = next(r for r in listed if r["id"] == response.json()["id"])
    assert stored["ingredients"] == RECIPE["ingredients"]
    assert stored["tags"] == RECIPE["tags"]


@pytest.mark.asyncio
async def test_create_recipe_defaults_optional_fields(client):
    response = await client.post(
        "/api/recipe/recipes/",
        json={"title": "Water", "time_minutes": 1, "price": "0.00"},
    )
    assert response.status_code == 201
    data = response.json()
    assert data["link"] == ""
    assert data["description"] == ""
    assert data["ingredients"] == []
    assert data["tags"] == []


@pytest.mark.asyncio
async def test_create_recipe_bad_body(client):
    response = await client.post(
        "/api/recipe/recipes/",
        content="{not json",
        headers={"Content-Type": "application/json"},
    )
    assert response.status_code == 400

    response = await client.post("/api/recipe/recipes/", json=["not", "an", "object"])
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_create_recipe_missing_fields_get_zero_values(client):
    response = await client.post("/api/recipe/recipes/", json={"title": "No time"})
    assert response.status_code == 201
    data = response.json()
    assert data["title"] == "No time"
    assert data["time_minutes"] == 0
    assert data["price"] == ""


@pytest.mark.asyncio
async def test_ingredient_and_tag_lists(client, seeded):
    ingredients = (await client.get("/api/recipe/ingredients/")).json()
    assert len(ingredients) == 22
    assert set(ingredients[0]) == {"id", "name"}

    assigned = (await client.get("/api/recipe/ingredients/", params={"assigned_only": 1})).json()
    assert {i["name"] for i in assigned} == {i["name"] for i in ingredients} - {"Flour"}

    tags = (await client.get("/api/recipe/tags/", params={"assigned_only": 1})).json()
    assert len(tags) == 6


@pytest.mark.asyncio
async def test_create_user(client):
    payload = {"email": "cook@example.com", "password": "secret", "name": "Cook"}

    response = await client.post("/api/user/create/", json=payload)
    assert response.status_code == 201
    assert response.json() == {"email": "cook@example.com", "name": "Cook"}

    response = await client.post("/api/user/create/", json=payload)
    assert response.status_code == 500
    assert response.json() == {"error": "Internal Server Error"}


@pytest.mark.asyncio
async def test_current_user(client):
    response = await client.get("/api/user/me/")
    assert response.json() == {"email": "user@example.com", "name": "Example User"}

    response = await client.put(
        "/api/user/me/",
        json={"email": "new@example.com", "name": "New", "password": "pw"},
    )
    assert response.status_code == 200
    assert response.json() == {"email": "new@example.com", "name": "New"}

    response = await client.patch("/api/user/me/", json={"name": "Renamed"})
    assert response.json() == {"email": "user@example.com", "name": "Renamed"}

    # nothing is kept between calls
    response = await client.get("/api/user/me/")
    assert response.json()["name"] == "Example User"


@pytest.mark.asyncio
async def test_token_echoes_credentials(client):
    payload = {"email": "cook@example.com", "password": "secret"}
    response = await client.post("/api/user/token/", json=payload)
    assert response.status_code == 200
    assert response.json() == payload


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "method,url",
    [
        ("DELETE", "/api/recipe/recipes/"),
        ("POST", "/api/recipe/tags/"),
        ("GET", "/api/user/create/"),
        ("DELETE", "/api/user/me/"),
        ("GET", "/api/user/token/"),
        ("POST", "/api"),
    ],
)
async def test_wrong_method(client, method, url):
    response = await client.request(method, url)
    assert response.status_code == 405


@pytest.mark.asyncio
async def test_create_recipe_stores_repeated_ingredient(client, seeded):
    app.dependency_overrides[get_settings] = lambda: Settings(persist_recipe_associations=True)
    garlic = [
        {"id": 12, "name": "Garlic", "amount": "2", "unit": "cloves"},
        {"id": 12, "name": "Garlic", "amount": "1", "unit": "tsp"},
    ]

    response = await client.post("/api/recipe/recipes/", json={**RECIPE, "ingredients": garlic})
    assert response.status_code == 201

    listed = (await client.get("/api/recipe/recipes/")).json()
    stored = next(r for r in listed if r["id"] == response.json()["id"])
    assert sorted(stored["ingredients"], key=lambda i: i["unit"]) == garlic


@pytest.mark.asyncio
async def test_user_endpoints_accept_partial_bodies(client):
    response = await client.post("/api/user/token/", json={"email": "a@example.com"})
    assert response.status_code == 200
    assert response.json() == {"email": "a@example.com", "password": ""}

    response = await client.put("/api/user/me/", json={"name": "N"})
    assert response.status_code == 200
    assert response.json() == {"email": "", "name": "N"}

    response = await client.post("/api/user/create/", json={"email": "b@example.com"})
    assert response.status_code == 201
    assert response.json() == {"email": "b@example.com", "name": ""}


@pytest.mark.asyncio
async def test_patch_current_user_ignores_non_string_values(client):
    response = await client.patch("/api/user/me/", json={"email": 5, "name": "N"})
    assert response.status_code == 200
    assert response.json() == {"email": "user@example.com", "name": "N"}
