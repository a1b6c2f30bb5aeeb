"""Tests for Product API endpoints."""
from decimal import Decimal


def create_product(client, **overrides):
    payload = {"name": "Test Product", "price": "99.99", "count_in_stock": 10}
    payload.update(overrides)
    return client.post("/api/v1/products/", json=payload)


def test_create_product(client):
    """Test creating a new product."""
    response = create_product(
        client,
        image="test.jpg",
        category="test Category",
        description="this is a test product",
        rating=5,
        num_reviews=10,
    )

    assert response.status_code == 201
    data = response.json()
    assert data["id"] == 1
    assert data["name"] == "Test Product"
    assert Decimal(data["price"]) == Decimal("99.99")
    assert data["count_in_stock"] == 10
    assert data["category"] == "test Category"
    assert data["created_at"]
    assert data["updated_at"] is None


def test_create_product_invalid_price(client):
    """Test creating product with invalid price fails."""
    response = create_product(client, price="-10.00")

    assert response.status_code == 422


def test_create_product_invalid_stock(client):
    """Test creating product with negative stock fails."""
    response = create_product(client, count_in_stock=-5)

    assert response.status_code == 422


def test_get_product(client):
    """Test getting a product by ID."""
    product_id = create_product(client).json()["id"]

    response = client.get(f"/api/v1/products/{product_id}")

    assert response.status_code == 200
    data = response.json()
    assert data["id"] == product_id
    assert data["name"] == "Test Product"


def test_get_product_not_found(client):
    """Test getting non-existent product returns 404."""
    response = client.get("/api/v1/products/9999")

    assert response.status_code == 404


def test_list_products(client):
    """Test listing returns every product."""
    for i in range(15):
        create_product(client, name=f"Product {i}", price=str(10 + i))

    response = client.get("/api/v1/products/")

    assert response.status_code == 200
    data = response.json()
    assert len(data) == 15
    assert data[0]["name"] == "Product 0"


def test_list_products_empty(client):
    response = client.get("/api/v1/products/")

    assert response.status_code == 200
    assert response.json() == []


def test_update_product(client):
    """Test patching a product keeps untouched fields."""
    product_id = create_product(client, name="Original Name", price="50.00").json()["id"]

    response = client.patch(
        f"/api/v1/products/{product_id}",
        json={"name": "Updated Name", "price": "75.00"}
    )

    assert response.status_code == 200
    data = response.json()
    assert data["name"] == "Updated Name"
    assert Decimal(data["price"]) == Decimal("75.00")
    assert data["count_in_stock"] == 10
    assert data["updated_at"] is not None

    fetched = client.get(f"/api/v1/products/{product_id}").json()
    assert fetched["name"] == "Updated Name"
    assert fetched["updated_at"] is not None


def test_update_product_not_found(client):
    response = client.patch("/api/v1/products/9999", json={"name": "Nobody"})

    assert response.status_code == 404


def test_delete_product(client):
    """Test deleting a product."""
    product_id = create_product(client, name="To Delete").json()["id"]

    response = client.delete(f"/api/v1/products/{product_id}")
    assert response.status_code == 204

    get_response = client.get(f"/api/v1/products/{product_id}")
    assert get_response.status_code == 404


def test_write_failure_maps_to_500(client, fail_statement):
    """Test storer write errors become a 500 with the failed step."""
    fail_statement("INSERT INTO products")

    response = create_product(client)

    assert response.status_code == 500
    assert response.json()["detail"] == "Failed inserting product"
