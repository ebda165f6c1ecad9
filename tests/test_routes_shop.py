import uuid

API = "/api/v1"


def test_health(client):
    assert client.get("/").json()["status"] == "ok"


def test_product_pages(client, make_product):
    for n in range(3):
        make_product(f"Product {n}", "1.00")

    first = client.get(f"{API}/products").json()
    assert [p["title"] for p in first["items"]] == ["Product 0", "Product 1"]
    assert first["total_count"] == 3
    assert first["has_next_page"] is True
    assert first["has_previous_page"] is False
    assert first["last_page"] == 2

    second = client.get(f"{API}/products", params={"page": 2}).json()
    assert [p["title"] for p in second["items"]] == ["Product 2"]
    assert second["has_next_page"] is False
    assert second["has_previous_page"] is True
    assert second["previous_page"] == 1


def test_unknown_product(client):
    assert client.get(f"{API}/products/{uuid.uuid4()}").status_code == 404


def test_admin_manages_products(client, make_user, auth_headers):
    admin = make_user("admin@example.com", role="admin")
    customer = make_user("cust@example.com")

    payload = {"title": "Tea", "price": "4.20"}
    assert (
        client.post(f"{API}/products", json=payload, headers=auth_headers(customer)).status_code
        == 403
    )

    r = client.post(f"{API}/products", json=payload, headers=auth_headers(admin))
    assert r.status_code == 201
    product_id = r.json()["id"]

    r = client.patch(
        f"{API}/products/{product_id}",
        json={"price": "5.00"},
        headers=auth_headers(admin),
    )
    assert r.status_code == 200
    assert r.json()["price"] == "5.00"


def test_cart_requires_login(client):
    assert client.get(f"{API}/cart").status_code == 401


def test_admin_has_no_cart(client, make_user, auth_headers):
    admin = make_user("admin@example.com", role="admin")
    assert client.get(f"{API}/cart", headers=auth_headers(admin)).status_code == 403


def test_cart_edits(client, customer, make_product, auth_headers):
    headers = auth_headers(customer)
    tea = make_product("Tea", "10.00")

    r = client.post(f"{API}/cart", json={"product_id": str(tea.id)}, headers=headers)
    assert r.status_code == 200
    assert r.json()["total_quantity"] == 1

    r = client.patch(f"{API}/cart/{tea.id}", json={"quantity": -2}, headers=headers)
    assert r.status_code == 422

    r = client.patch(f"{API}/cart/{tea.id}", json={"quantity": 3}, headers=headers)
    assert r.json()["items"][0]["quantity"] == 3
    assert r.json()["total_price"] == "30.00"

    r = client.delete(f"{API}/cart/{tea.id}", headers=headers)
    assert r.status_code == 200
    assert r.json()["items"] == []

    r = client.post(f"{API}/cart", json={"product_id": str(uuid.uuid4())}, headers=headers)
    assert r.status_code == 404


def test_checkout_and_invoice(client, customer, make_product, auth_headers, invoice_dir):
    headers = auth_headers(customer)
    tea = make_product("Tea", "10.00")
    cake = make_product("Cake", "5.50")

    for product in (tea, tea, cake):
        client.post(f"{API}/cart", json={"product_id": str(product.id)}, headers=headers)

    r = client.post(f"{API}/orders/checkout", headers=headers)
    assert r.status_code == 201
    order = r.json()
    assert order["total_price"] == "25.50"
    assert client.get(f"{API}/cart", headers=headers).json()["items"] == []

    listed = client.get(f"{API}/orders", headers=headers).json()
    assert [o["id"] for o in listed] == [order["id"]]

    r = client.get(f"{API}/orders/{order['id']}/invoice", headers=headers)
    assert r.status_code == 200
    assert r.headers["content-type"] == "application/pdf"
    assert r.headers["content-disposition"] == f'inline; filename="invoice-{order["id"]}.pdf"'
    assert b"Tea - 2 x $10.00" in r.content
    assert b"Cake - 1 x $5.50" in r.content
    assert b"Total Price: $25.50" in r.content
    assert (invoice_dir / f"invoice-{order['id']}.pdf").read_bytes() == r.content


def test_checkout_empty_cart(client, customer, auth_headers):
    r = client.post(f"{API}/orders/checkout", headers=auth_headers(customer))
    assert r.status_code == 400


def test_orders_of_other_users(client, customer, make_user, make_product, auth_headers, invoice_dir):
    tea = make_product("Tea", "10.00")
    client.post(f"{API}/cart", json={"product_id": str(tea.id)}, headers=auth_headers(customer))
    order_id = client.post(f"{API}/orders/checkout", headers=auth_headers(customer)).json()["id"]

    bob = make_user("bob@example.com")
    bob_headers = auth_headers(bob)

    assert client.get(f"{API}/orders/{order_id}", headers=bob_headers).status_code == 403
    assert client.get(f"{API}/orders/{order_id}/invoice", headers=bob_headers).status_code == 403
    assert client.get(f"{API}/orders/{uuid.uuid4()}", headers=bob_headers).status_code == 404
    assert client.get(f"{API}/orders", headers=bob_headers).json() == []
    assert not (invoice_dir / f"invoice-{order_id}.pdf").exists()
