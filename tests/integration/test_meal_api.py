from __future__ import annotations

from fastapi.testclient import TestClient


def _auth(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


def _restaurant(client: TestClient, token: str, category: str) -> dict:
    response = client.post(
        "/restaurants",
        json={
            "name": f"{category} house",
            "description": "Meals all day",
            "email": "house@example.com",
            "phoneNo": "5555550100",
            "address": "3 Market Road",
            "category": category,
        },
        headers=_auth(token),
    )
    assert response.status_code == 201, response.text
    return response.json()


def _meal_payload(restaurant_id: str, name: str = "Soup", price: float = 5.0) -> dict:
    return {
        "name": name,
        "description": "Of the day",
        "price": price,
        "category": "Soups",
        "restaurant": restaurant_id,
    }


def test_cafe_meal_create_is_forbidden_for_others_and_upserts_by_name(
    client: TestClient, register
) -> None:
    u1_token, _ = register()
    u2_token, _ = register()
    r1 = _restaurant(client, u1_token, "Cafe")

    forbidden = client.post("/meals", json=_meal_payload(r1["id"]), headers=_auth(u2_token))
    created = client.post("/meals", json=_meal_payload(r1["id"]), headers=_auth(u1_token))
    updated = client.post(
        "/meals",
        json=_meal_payload(r1["id"], name="soup ", price=6.0),
        headers=_auth(u1_token),
    )

    assert forbidden.status_code == 403
    assert forbidden.json()["error"]["message"] == "You do not own this restaurant or lack permissions"
    assert created.status_code == 201
    assert created.json()["outcome"] == "created"
    assert created.json()["restaurant"]["mealIds"] == [created.json()["mealId"]]
    assert updated.status_code == 200
    assert updated.json()["outcome"] == "updated"
    assert updated.json()["mealId"] == created.json()["mealId"]
    assert updated.json()["restaurant"]["mealIds"] == [created.json()["mealId"]]
    assert updated.json()["restaurant"]["meals"][0]["price"] == 6.0


def test_meal_create_rejects_client_supplied_user(client: TestClient, register) -> None:
    token, user = register()
    restaurant = _restaurant(client, token, "Cafe")

    response = client.post(
        "/meals",
        json={**_meal_payload(restaurant["id"]), "user": user["id"]},
        headers=_auth(token),
    )

    assert response.status_code == 400
    assert "You cannot provide a User ID." in response.text


def test_fine_dining_meal_update_by_other_user(client: TestClient, register) -> None:
    u1_token, _ = register()
    u2_token, u2 = register()
    r2 = _restaurant(client, u1_token, "Fine Dining")
    meal_id = client.post(
        "/meals", json=_meal_payload(r2["id"]), headers=_auth(u1_token)
    ).json()["mealId"]

    response = client.put(
        f"/meals/{meal_id}/restaurant/{r2['id']}",
        json={"price": 11.5},
        headers=_auth(u2_token),
    )

    assert response.status_code == 200
    assert response.json()["owner"]["id"] == u2["id"]
    assert response.json()["price"] == 11.5
    assert response.json()["name"] == "soup"


def test_meal_update_path_mismatch_is_bad_request(client: TestClient, register) -> None:
    token, _ = register()
    first = _restaurant(client, token, "Cafe")
    second = _restaurant(client, token, "Cafe")
    meal_id = client.post(
        "/meals", json=_meal_payload(first["id"]), headers=_auth(token)
    ).json()["mealId"]

    response = client.put(
        f"/meals/{meal_id}/restaurant/{second['id']}",
        json={"price": 1.0},
        headers=_auth(token),
    )

    assert response.status_code == 400
    assert response.json()["error"]["message"] == "Meal does not belong to the specified restaurant"


def test_meal_rename_collision_is_conflict(client: TestClient, register) -> None:
    token, _ = register()
    restaurant = _restaurant(client, token, "Cafe")
    client.post("/meals", json=_meal_payload(restaurant["id"], name="Soup"), headers=_auth(token))
    salad_id = client.post(
        "/meals", json=_meal_payload(restaurant["id"], name="Salad"), headers=_auth(token)
    ).json()["mealId"]

    response = client.put(
        f"/meals/{salad_id}/restaurant/{restaurant['id']}",
        json={"name": "SOUP"},
        headers=_auth(token),
    )

    assert response.status_code == 409


def test_delete_messages_and_meal_refs(client: TestClient, register) -> None:
    admin_token, _ = register(role="admin")
    owner_token, _ = register()
    stranger_token, _ = register()
    fine = _restaurant(client, owner_token, "Fine Dining")
    soup = client.post(
        "/meals", json=_meal_payload(fine["id"], name="Soup"), headers=_auth(owner_token)
    ).json()
    salad = client.post(
        "/meals", json=_meal_payload(fine["id"], name="Salad"), headers=_auth(owner_token)
    ).json()
    assert len(salad["restaurant"]["mealIds"]) == 2

    denied = client.delete(
        f"/meals/{soup['mealId']}/restaurant/{fine['id']}", headers=_auth(stranger_token)
    )
    by_owner = client.delete(
        f"/meals/{soup['mealId']}/restaurant/{fine['id']}", headers=_auth(owner_token)
    )
    by_admin = client.delete(
        f"/meals/{salad['mealId']}/restaurant/{fine['id']}", headers=_auth(admin_token)
    )
    gone = client.delete(
        f"/meals/{salad['mealId']}/restaurant/{fine['id']}", headers=_auth(admin_token)
    )
    restaurant = client.get(f"/restaurants/{fine['id']}", headers=_auth(owner_token))

    assert denied.status_code == 401
    assert denied.json()["error"]["message"] == "You are not the owner of this restaurant"
    assert by_owner.json() == {"message": "Meal deleted successfully"}
    assert by_admin.json() == {"message": "Meal deleted successfully by admin"}
    assert gone.status_code == 404
    assert gone.json()["error"]["message"] == "Meal not found or already deleted"
    assert restaurant.json()["mealIds"] == []


def test_meal_listings_by_role_and_restaurant(client: TestClient, register) -> None:
    owner_token, _ = register()
    viewer_token, _ = register()
    cafe = _restaurant(client, owner_token, "Cafe")
    meal_id = client.post(
        "/meals", json=_meal_payload(cafe["id"]), headers=_auth(owner_token)
    ).json()["mealId"]

    owner_list = client.get("/meals", headers=_auth(owner_token))
    viewer_list = client.get("/meals", headers=_auth(viewer_token))
    by_restaurant = client.get(f"/meals/restaurant/{cafe['id']}", headers=_auth(owner_token))
    denied = client.get(f"/meals/restaurant/{cafe['id']}", headers=_auth(viewer_token))

    assert owner_list.json()["role"] == "user"
    assert meal_id in {item["id"] for item in owner_list.json()["meals"]}
    assert meal_id not in {item["id"] for item in viewer_list.json()["meals"]}
    assert [item["id"] for item in by_restaurant.json()] == [meal_id]
    assert by_restaurant.json()[0]["restaurant"]["id"] == cafe["id"]
    assert denied.status_code == 401
