"""
Larder Backend — Pantry API Tests
==================================

What:  Ingredients, calorie log, shopping list and leaderboard over HTTP.

Test Strategy:
    ✅ Presence checks and their exact messages
    ✅ Every read is scoped to the caller (two users, disjoint data)
    ✅ Deleting a foreign or missing item answers success and removes nothing
    ✅ Calories come back newest first
    ✅ Leaderboard is public, capped at five, highest score first
    ✅ A database failure maps to the operation's 500 message
"""

from unittest.mock import AsyncMock, patch

import pytest
from sqlalchemy.exc import OperationalError


def auth_headers(user):
    return {"Authorization": user["token"]}


def db_down():
    return AsyncMock(side_effect=OperationalError("SELECT", {}, Exception("disk I/O error")))


class TestIngredients:

    @pytest.mark.asyncio
    async def test_add_and_list(self, test_client, make_user):
        alice = await make_user("alice")
        response = await test_client.post(
            "/ingredients",
            json={"name": "eggs", "quantity": "12", "expiry": "2025-01-10"},
            headers=auth_headers(alice),
        )
        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "Ingredient added"
        assert isinstance(body["ingredientId"], int)

        response = await test_client.get("/getIngredients", headers=auth_headers(alice))
        assert response.status_code == 200
        assert response.json() == {
            "ingredients": [
                {
                    "id": body["ingredientId"],
                    "name": "eggs",
                    "quantity": "12",
                    "expiry": "2025-01-10",
                    "user_id": alice["id"],
                }
            ]
        }

    @pytest.mark.asyncio
    async def test_expiry_is_optional(self, test_client, make_user):
        alice = await make_user("alice")
        response = await test_client.post(
            "/ingredients", json={"name": "flour", "quantity": "1kg"}, headers=auth_headers(alice)
        )
        assert response.status_code == 200

        rows = (await test_client.get("/getIngredients", headers=auth_headers(alice))).json()
        assert rows["ingredients"][0]["expiry"] is None

    @pytest.mark.asyncio
    async def test_numeric_quantity_stored_as_text(self, test_client, make_user):
        alice = await make_user("alice")
        await test_client.post(
            "/ingredients", json={"name": "apples", "quantity": 6}, headers=auth_headers(alice)
        )
        rows = (await test_client.get("/getIngredients", headers=auth_headers(alice))).json()
        assert rows["ingredients"][0]["quantity"] == "6"

    @pytest.mark.asyncio
    async def test_numeric_name_and_expiry_stored_as_text(self, test_client, make_user):
        alice = await make_user("alice")
        response = await test_client.post(
            "/ingredients",
            json={"name": 7, "quantity": 2, "expiry": 20250110},
            headers=auth_headers(alice),
        )
        assert response.status_code == 200

        row = (await test_client.get("/getIngredients", headers=auth_headers(alice))).json()
        assert row["ingredients"][0]["name"] == "7"
        assert row["ingredients"][0]["expiry"] == "20250110"

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "payload",
        [
            {"quantity": "1"},
            {"name": "milk"},
            {"name": "", "quantity": "1"},
            {},
        ],
    )
    async def test_missing_fields(self, test_client, make_user, payload):
        alice = await make_user("alice")
        response = await test_client.post(
            "/ingredients", json=payload, headers=auth_headers(alice)
        )
        assert response.status_code == 400
        assert response.json() == {"error": "Missing fields"}

    @pytest.mark.asyncio
    async def test_names_comma_joined(self, test_client, make_user):
        alice = await make_user("alice")
        for name in ["eggs", "milk", "flour"]:
            await test_client.post(
                "/ingredients", json={"name": name, "quantity": "1"}, headers=auth_headers(alice)
            )

        response = await test_client.get("/ingredients-list", headers=auth_headers(alice))
        assert response.status_code == 200
        assert response.json() == {"ingredients": "eggs,milk,flour"}

    @pytest.mark.asyncio
    async def test_names_empty(self, test_client, make_user):
        alice = await make_user("alice")
        response = await test_client.get("/ingredients-list", headers=auth_headers(alice))
        assert response.json() == {"ingredients": ""}

    @pytest.mark.asyncio
    async def test_scoped_to_caller(self, test_client, make_user):
        alice = await make_user("alice")
        bob = await make_user("bob")
        await test_client.post(
            "/ingredients", json={"name": "eggs", "quantity": "12"}, headers=auth_headers(alice)
        )
        await test_client.post(
            "/ingredients", json={"name": "tofu", "quantity": "1"}, headers=auth_headers(bob)
        )

        alice_rows = (await test_client.get("/getIngredients", headers=auth_headers(alice))).json()
        bob_names = (await test_client.get("/ingredients-list", headers=auth_headers(bob))).json()

        assert [row["name"] for row in alice_rows["ingredients"]] == ["eggs"]
        assert bob_names == {"ingredients": "tofu"}

    @pytest.mark.asyncio
    async def test_database_failure(self, test_client, make_user, repository):
        alice = await make_user("alice")
        with patch.object(repository, "list_ingredients", db_down()):
            response = await test_client.get("/getIngredients", headers=auth_headers(alice))
        assert response.status_code == 500
        assert response.json() == {"error": "Failed to fetch ingredients"}

    @pytest.mark.asyncio
    async def test_insert_failure(self, test_client, make_user, repository):
        alice = await make_user("alice")
        with patch.object(repository, "add_ingredient", db_down()):
            response = await test_client.post(
                "/ingredients", json={"name": "eggs", "quantity": "1"}, headers=auth_headers(alice)
            )
        assert response.status_code == 500
        assert response.json() == {"error": "Failed to add ingredient"}


class TestCalories:

    @pytest.mark.asyncio
    async def test_log_and_list_newest_first(self, test_client, make_user):
        alice = await make_user("alice")
        ids = []
        for food, calories in [("toast", 150), ("salad", 320), ("pasta", 640)]:
            response = await test_client.post(
                "/calories",
                json={"food": food, "calories": calories},
                headers=auth_headers(alice),
            )
            assert response.status_code == 200
            assert response.json()["message"] == "Calories logged."
            ids.append(response.json()["entryId"])

        response = await test_client.get("/calories", headers=auth_headers(alice))
        assert response.status_code == 200
        entries = response.json()["entries"]
        assert [entry["id"] for entry in entries] == list(reversed(ids))
        assert [entry["food"] for entry in entries] == ["pasta", "salad", "toast"]
        assert all("created_at" in entry for entry in entries)

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "payload",
        [{"food": "toast"}, {"calories": 100}, {"food": "toast", "calories": 0}, {}],
    )
    async def test_missing_fields(self, test_client, make_user, payload):
        alice = await make_user("alice")
        response = await test_client.post("/calories", json=payload, headers=auth_headers(alice))
        assert response.status_code == 400
        assert response.json() == {"error": "Food and calories are required."}

    @pytest.mark.asyncio
    async def test_non_numeric_calories(self, test_client, make_user):
        alice = await make_user("alice")
        response = await test_client.post(
            "/calories", json={"food": "toast", "calories": "lots"}, headers=auth_headers(alice)
        )
        assert response.status_code == 400
        assert response.json() == {"error": "Invalid request"}

    @pytest.mark.asyncio
    async def test_calories_beyond_column_range(self, test_client, make_user):
        alice = await make_user("alice")
        response = await test_client.post(
            "/calories", json={"food": "toast", "calories": 2**70}, headers=auth_headers(alice)
        )
        assert response.status_code == 500
        assert response.json() == {"error": "Failed to log calories."}

        response = await test_client.get("/calories", headers=auth_headers(alice))
        assert response.json() == {"entries": []}

    @pytest.mark.asyncio
    async def test_scoped_to_caller(self, test_client, make_user):
        alice = await make_user("alice")
        bob = await make_user("bob")
        await test_client.post(
            "/calories", json={"food": "toast", "calories": 150}, headers=auth_headers(alice)
        )

        response = await test_client.get("/calories", headers=auth_headers(bob))
        assert response.json() == {"entries": []}

    @pytest.mark.asyncio
    async def test_database_failure(self, test_client, make_user, repository):
        alice = await make_user("alice")
        with patch.object(repository, "list_calorie_entries", db_down()):
            response = await test_client.get("/calories", headers=auth_headers(alice))
        assert response.status_code == 500
        assert response.json() == {"error": "Failed to fetch data."}


class TestShoppingList:

    @pytest.mark.asyncio
    async def test_add_list_delete(self, test_client, make_user):
        alice = await make_user("alice")
        response = await test_client.post(
            "/shopping-list", json={"name": "bread", "quantity": "1"}, headers=auth_headers(alice)
        )
        assert response.status_code == 200
        assert response.json()["message"] == "Item added"
        item_id = response.json()["itemId"]

        items = (await test_client.get("/shopping-list", headers=auth_headers(alice))).json()
        assert items == {
            "items": [{"id": item_id, "name": "bread", "quantity": "1", "user_id": alice["id"]}]
        }

        response = await test_client.delete(
            f"/shopping-list/{item_id}", headers=auth_headers(alice)
        )
        assert response.status_code == 200
        assert response.json() == {"message": "Item deleted"}

        items = (await test_client.get("/shopping-list", headers=auth_headers(alice))).json()
        assert items == {"items": []}

    @pytest.mark.asyncio
    async def test_missing_fields(self, test_client, make_user):
        alice = await make_user("alice")
        response = await test_client.post(
            "/shopping-list", json={"name": "bread"}, headers=auth_headers(alice)
        )
        assert response.status_code == 400
        assert response.json() == {"error": "Missing fields"}

    @pytest.mark.asyncio
    async def test_delete_foreign_item_answers_success_but_keeps_it(self, test_client, make_user):
        alice = await make_user("alice")
        bob = await make_user("bob")
        response = await test_client.post(
            "/shopping-list", json={"name": "bread", "quantity": "1"}, headers=auth_headers(alice)
        )
        item_id = response.json()["itemId"]

        response = await test_client.delete(
            f"/shopping-list/{item_id}", headers=auth_headers(bob)
        )
        assert response.status_code == 200
        assert response.json() == {"message": "Item deleted"}

        items = (await test_client.get("/shopping-list", headers=auth_headers(alice))).json()
        assert [item["id"] for item in items["items"]] == [item_id]

    @pytest.mark.asyncio
    async def test_delete_missing_item_answers_success(self, test_client, make_user):
        alice = await make_user("alice")
        response = await test_client.delete("/shopping-list/9999", headers=auth_headers(alice))
        assert response.status_code == 200
        assert response.json() == {"message": "Item deleted"}

    @pytest.mark.asyncio
    @pytest.mark.parametrize("item_id", [2**70, -(2**70), 2**63])
    async def test_delete_id_beyond_column_range_answers_success(
        self, test_client, make_user, item_id
    ):
        alice = await make_user("alice")
        await test_client.post(
            "/shopping-list", json={"name": "bread", "quantity": "1"}, headers=auth_headers(alice)
        )
        response = await test_client.delete(
            f"/shopping-list/{item_id}", headers=auth_headers(alice)
        )
        assert response.status_code == 200
        assert response.json() == {"message": "Item deleted"}

        items = (await test_client.get("/shopping-list", headers=auth_headers(alice))).json()
        assert len(items["items"]) == 1

    @pytest.mark.asyncio
    async def test_delete_non_numeric_id(self, test_client, make_user):
        alice = await make_user("alice")
        response = await test_client.delete("/shopping-list/abc", headers=auth_headers(alice))
        assert response.status_code == 400
        assert response.json() == {"error": "Invalid request"}

    @pytest.mark.asyncio
    async def test_scoped_to_caller(self, test_client, make_user):
        alice = await make_user("alice")
        bob = await make_user("bob")
        await test_client.post(
            "/shopping-list", json={"name": "bread", "quantity": "1"}, headers=auth_headers(alice)
        )
        items = (await test_client.get("/shopping-list", headers=auth_headers(bob))).json()
        assert items == {"items": []}

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "method, path, repo_method, message",
        [
            ("GET", "/shopping-list", "list_shopping_items", "Failed to load shopping list"),
            ("DELETE", "/shopping-list/1", "delete_shopping_item", "Failed to delete item"),
        ],
    )
    async def test_database_failure(
        self, test_client, make_user, repository, method, path, repo_method, message
    ):
        alice = await make_user("alice")
        with patch.object(repository, repo_method, db_down()):
            response = await test_client.request(method, path, headers=auth_headers(alice))
        assert response.status_code == 500
        assert response.json() == {"error": message}


class TestLeaderboard:

    @pytest.mark.asyncio
    async def test_public_top_five_by_score(self, test_client, make_user, set_score):
        scores = {"ann": 10, "ben": 50, "cat": 30, "dan": 0, "eve": 40, "fay": 20}
        for username, score in scores.items():
            user = await make_user(username)
            await set_score(user["id"], score)

        response = await test_client.get("/leaderboard")

        assert response.status_code == 200
        assert response.json() == {
            "leaderboard": [
                {"username": "ben", "points": 50},
                {"username": "eve", "points": 40},
                {"username": "cat", "points": 30},
                {"username": "fay", "points": 20},
                {"username": "ann", "points": 10},
            ]
        }

    @pytest.mark.asyncio
    async def test_new_users_start_at_zero(self, test_client, make_user):
        await make_user("alice")
        response = await test_client.get("/leaderboard")
        assert response.json() == {"leaderboard": [{"username": "alice", "points": 0}]}

    @pytest.mark.asyncio
    async def test_empty(self, test_client):
        response = await test_client.get("/leaderboard")
        assert response.json() == {"leaderboard": []}

    @pytest.mark.asyncio
    async def test_database_failure(self, test_client, repository):
        with patch.object(repository, "top_users_by_score", db_down()):
            response = await test_client.get("/leaderboard")
        assert response.status_code == 500
        assert response.json() == {"error": "Failed to retrieve leaderboard"}
