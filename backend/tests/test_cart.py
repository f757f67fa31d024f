"""
Cart endpoint tests: add/merge, quantity updates, removal and per-user scoping.
"""
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import text

from models.cart import CartLine


def _cart(client: TestClient, user_id=None):
    params = {"userId": user_id} if user_id is not None else None
    response = client.get("/api/cart", params=params)
    assert response.status_code == 200
    return response.json()


class TestAddToCart:

    def test_same_product_twice_merges_into_one_line(self, test_client: TestClient, products):
        assert test_client.post("/api/cart", json={"productId": 1, "qty": 2}).json() == {"message": "Added to cart"}
        assert test_client.post("/api/cart", json={"productId": 1, "qty": 3}).status_code == 200

        data = _cart(test_client)

        assert len(data["cart"]) == 1
        line = data["cart"][0]
        assert line["productId"] == 1
        assert line["qty"] == 5
        assert line["name"] == "Shoes"
        assert "cartId" in line
        assert data["total"] == pytest.approx(5 * products[1])

    def test_total_is_sum_of_price_times_qty(self, test_client: TestClient, products):
        test_client.post("/api/cart", json={"productId": 2, "qty": 1})
        test_client.post("/api/cart", json={"productId": 3, "qty": 5})

        data = _cart(test_client)

        expected = sum(line["price"] * line["qty"] for line in data["cart"])
        assert data["total"] == pytest.approx(expected)
        assert data["total"] == pytest.approx(700 + 5 * 109.95)

    def test_lines_are_partitioned_by_user(self, test_client: TestClient):
        test_client.post("/api/cart", json={"productId": 1, "qty": 1, "userId": 7})
        test_client.post("/api/cart?userId=8", json={"productId": 2, "qty": 4})

        assert [l["productId"] for l in _cart(test_client, 7)["cart"]] == [1]
        assert [l["productId"] for l in _cart(test_client, 8)["cart"]] == [2]
        assert _cart(test_client)["cart"] == []

    def test_missing_product_id_is_bad_request(self, test_client: TestClient):
        response = test_client.post("/api/cart", json={"qty": 1})

        assert response.status_code == 400
        assert response.json() == {"error": "productId is required"}

    def test_empty_product_id_counts_as_missing(self, test_client: TestClient):
        response = test_client.post("/api/cart", json={"productId": "", "qty": 1})

        assert response.status_code == 400
        assert response.json() == {"error": "productId is required"}

    def test_missing_qty_is_bad_request(self, test_client: TestClient):
        response = test_client.post("/api/cart", json={"productId": 1})

        assert response.status_code == 400
        assert response.json() == {"error": "qty is required"}

    def test_non_positive_qty_is_rejected(self, test_client: TestClient):
        response = test_client.post("/api/cart", json={"productId": 1, "qty": 0})

        assert response.status_code == 400
        assert response.json() == {"error": "qty is invalid"}

    def test_unknown_product_is_not_found(self, test_client: TestClient):
        response = test_client.post("/api/cart", json={"productId": 999, "qty": 1})

        assert response.status_code == 404
        assert response.json() == {"error": "Product not found"}
        assert _cart(test_client)["cart"] == []


class TestUpdateQuantity:

    def _add(self, client, product_id=1, qty=2, user_id=1):
        client.post("/api/cart", json={"productId": product_id, "qty": qty, "userId": user_id})
        return _cart(client, user_id)["cart"][0]["cartId"]

    def test_sets_quantity(self, test_client: TestClient):
        cart_id = self._add(test_client)

        response = test_client.patch("/api/cart-update", json={"cartId": cart_id, "qty": 9})

        assert response.status_code == 200
        assert response.json() == {"message": "Updated"}
        assert _cart(test_client)["cart"][0]["qty"] == 9

    @pytest.mark.parametrize("qty", [0, -3])
    def test_non_positive_quantity_removes_line(self, test_client: TestClient, qty):
        cart_id = self._add(test_client)

        response = test_client.patch("/api/cart-update", json={"cartId": cart_id, "qty": qty})

        assert response.status_code == 200
        assert response.json() == {"message": "Removed"}
        data = _cart(test_client)
        assert data["cart"] == []
        assert data["total"] == 0

    def test_other_users_line_is_not_found(self, test_client: TestClient):
        cart_id = self._add(test_client, user_id=1)

        response = test_client.patch("/api/cart-update", json={"cartId": cart_id, "qty": 4, "userId": 2})

        assert response.status_code == 404
        assert _cart(test_client, 1)["cart"][0]["qty"] == 2

    def test_other_users_line_is_not_removed_by_zero_qty(self, test_client: TestClient):
        cart_id = self._add(test_client, user_id=1)

        response = test_client.patch("/api/cart-update?userId=2", json={"cartId": cart_id, "qty": 0})

        assert response.status_code == 404
        assert len(_cart(test_client, 1)["cart"]) == 1

    def test_missing_cart_id_is_bad_request(self, test_client: TestClient):
        response = test_client.patch("/api/cart-update", json={"qty": 1})

        assert response.status_code == 400
        assert response.json() == {"error": "cartId is required"}


class TestRemoveFromCart:

    def test_removes_own_line(self, test_client: TestClient):
        test_client.post("/api/cart", json={"productId": 2, "qty": 1})
        cart_id = _cart(test_client)["cart"][0]["cartId"]

        response = test_client.delete(f"/api/cart/{cart_id}")

        assert response.status_code == 200
        assert response.json() == {"message": "Removed"}
        assert _cart(test_client)["cart"] == []

    def test_other_users_line_is_not_found(self, test_client: TestClient):
        test_client.post("/api/cart", json={"productId": 2, "qty": 1, "userId": 3})
        cart_id = _cart(test_client, 3)["cart"][0]["cartId"]

        response = test_client.delete(f"/api/cart/{cart_id}", params={"userId": 4})

        assert response.status_code == 404
        assert response.json() == {"error": "Cart item not found"}
        assert len(_cart(test_client, 3)["cart"]) == 1

    def test_unknown_line_is_not_found(self, test_client: TestClient):
        assert test_client.delete("/api/cart/12345").status_code == 404

    def test_non_integer_id_is_bad_request(self, test_client: TestClient):
        response = test_client.delete("/api/cart/abc")

        assert response.status_code == 400
        assert response.json() == {"error": "id is invalid"}


class TestDanglingProduct:

    def test_line_without_product_is_left_out(self, test_client: TestClient, db_session, products):
        db_session.add(CartLine(product_id=999, qty=3, user_id=1))
        db_session.commit()
        test_client.post("/api/cart", json={"productId": 2, "qty": 2})

        data = _cart(test_client)

        assert [l["productId"] for l in data["cart"]] == [2]
        assert data["total"] == pytest.approx(2 * products[2])


class TestStorageFailure:

    def test_database_error_returns_generic_500(self, test_client: TestClient, engine):
        with engine.begin() as conn:
            conn.execute(text("DROP TABLE cart"))

        response = test_client.get("/api/cart")

        assert response.status_code == 500
        assert response.json() == {"error": "Internal server error"}
