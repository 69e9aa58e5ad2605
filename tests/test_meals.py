CHEF = "chef@foodchef.io"


def _meal(name, orders=0, chef=CHEF, price=9.5):
    return {"name": name, "price": price, "chefEmail": chef, "orders": orders, "image": f"{name}.png"}


def _create(client, headers, meal):
    response = client.post("/meals", json=meal, headers=headers)
    assert response.status_code == 200
    return response.json()["insertedId"]


def test_create_and_get_meal(client, auth_headers):
    meal_id = _create(client, auth_headers(CHEF), _meal("Khichuri"))

    response = client.get(f"/meals/{meal_id}")
    assert response.status_code == 200
    body = response.json()
    assert body["_id"] == meal_id
    assert body["name"] == "Khichuri"
    # Extra fields are kept as sent
    assert body["image"] == "Khichuri.png"


def test_list_meals_is_public(client, auth_headers):
    headers = auth_headers(CHEF)
    _create(client, headers, _meal("Pulao"))
    _create(client, headers, _meal("Halim"))

    response = client.get("/meals")
    assert response.status_code == 200
    assert {m["name"] for m in response.json()} == {"Pulao", "Halim"}


def test_get_meal_malformed_id(client):
    response = client.get("/meals/not-an-object-id")
    assert response.status_code == 400


def test_get_meal_missing(client):
    response = client.get("/meals/64b7f0c2a1b2c3d4e5f60718")
    assert response.status_code == 404


def test_top_meals_limited_and_sorted(client, auth_headers):
    headers = auth_headers(CHEF)
    for i, count in enumerate([3, 40, 7, 0, 25, 12, 99, 5]):
        _create(client, headers, _meal(f"meal-{i}", orders=count))

    response = client.get("/meals/top")
    assert response.status_code == 200
    counts = [m["orders"] for m in response.json()]
    assert counts == [99, 40, 25, 12, 7, 5]


def test_top_meals_with_few_meals(client, auth_headers):
    headers = auth_headers(CHEF)
    _create(client, headers, _meal("a", orders=1))
    _create(client, headers, _meal("b", orders=2))

    response = client.get("/meals/top")
    assert [m["name"] for m in response.json()] == ["b", "a"]


def test_meals_by_chef(client, auth_headers):
    headers = auth_headers(CHEF)
    _create(client, headers, _meal("Mine"))
    _create(client, headers, _meal("Theirs", chef="other@foodchef.io"))

    response = client.get(f"/meals/chef/{CHEF}", headers=headers)
    assert response.status_code == 200
    assert [m["name"] for m in response.json()] == ["Mine"]


def test_delete_meal_removes_it_from_list(client, auth_headers):
    headers = auth_headers(CHEF)
    keep_id = _create(client, headers, _meal("Keep"))
    drop_id = _create(client, headers, _meal("Drop"))

    response = client.delete(f"/meals/{drop_id}", headers=headers)
    assert response.status_code == 200
    assert response.json()["deletedCount"] == 1

    ids = [m["_id"] for m in client.get("/meals").json()]
    assert ids == [keep_id]


def test_negative_price_rejected(client, auth_headers):
    response = client.post("/meals", json=_meal("Bad", price=-1), headers=auth_headers(CHEF))
    assert response.status_code == 400
