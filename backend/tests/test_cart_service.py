import pytest

from sales_calculator.exceptions import NotFoundError
from sales_calculator.services import cart_service, products_service
from sales_calculator.validation import MAX_QUANTITY, ValidationError


def _line_for(product_id, cart_id=None):
    lines = [line for line in cart_service.list_cart(cart_id) if line["product_id"] == product_id]
    assert len(lines) <= 1
    return lines[0] if lines else None


class TestAddToCart:

    @pytest.mark.smoke
    def test_repeat_adds_accumulate_on_one_line(self, make_product):
        product_id = make_product("Mouse", price_cents=2999)

        first = cart_service.add_to_cart(product_id, 2)
        second = cart_service.add_to_cart(product_id, 3)

        assert first == second
        lines = cart_service.list_cart()
        assert len(lines) == 1
        assert lines[0]["quantity"] == 5

    def test_default_quantity_is_one(self, make_product):
        product_id = make_product()
        cart_service.add_to_cart(product_id)
        cart_service.add_to_cart(product_id)
        assert _line_for(product_id)["quantity"] == 2

    def test_unknown_product(self, db_session):
        with pytest.raises(NotFoundError):
            cart_service.add_to_cart(31337, 1)
        assert cart_service.list_cart() == []

    def test_negative_add_that_empties_line_removes_it(self, make_product):
        product_id = make_product()
        cart_service.add_to_cart(product_id, 2)

        assert cart_service.add_to_cart(product_id, -2) is None
        assert _line_for(product_id) is None

    def test_non_positive_first_add_creates_nothing(self, make_product):
        product_id = make_product()
        assert cart_service.add_to_cart(product_id, 0) is None
        assert cart_service.list_cart() == []

    def test_accumulated_quantity_is_capped(self, make_product):
        product_id = make_product()
        cart_service.add_to_cart(product_id, MAX_QUANTITY)

        with pytest.raises(ValidationError):
            cart_service.add_to_cart(product_id, 1)
        assert _line_for(product_id)["quantity"] == MAX_QUANTITY


class TestListCart:

    def test_lines_joined_with_live_product_data(self, make_product):
        product_id = make_product("Keyboard", price_cents=7999, image="file:///kb.png")
        cart_service.add_to_cart(product_id, 2)

        line = _line_for(product_id)
        assert line["name"] == "Keyboard"
        assert line["price_cents"] == 7999
        assert line["image"] == "file:///kb.png"
        assert line["line_total_cents"] == 15998
        assert line["quantity"] == 2
        assert line["cart_id"] is not None
        assert line["created_at"].endswith("Z")

    def test_price_is_live_not_snapshotted(self, make_product):
        product_id = make_product("Keyboard", price_cents=7999)
        cart_service.add_to_cart(product_id, 2)

        products_service.update_product(product_id=product_id, patch={"price_cents": 6000})

        assert _line_for(product_id)["price_cents"] == 6000
        assert cart_service.cart_total_cents() == 12000

    def test_empty_install_has_empty_cart(self, db_session):
        assert cart_service.list_cart() == []
        assert cart_service.cart_total_cents() == 0


class TestCartQuantity:

    @pytest.mark.parametrize("quantity", [0, -5])
    def test_zero_or_negative_removes_line(self, make_product, quantity):
        product_id = make_product()
        line_id = cart_service.add_to_cart(product_id, 3)

        cart_service.set_cart_quantity(line_id, quantity)

        assert _line_for(product_id) is None

    def test_positive_overwrites(self, make_product):
        product_id = make_product()
        line_id = cart_service.add_to_cart(product_id, 3)

        cart_service.set_cart_quantity(line_id, 7)

        assert _line_for(product_id)["quantity"] == 7

    def test_missing_line(self, db_session):
        with pytest.raises(NotFoundError):
            cart_service.set_cart_quantity(555, 2)

    def test_remove_is_noop_when_absent(self, db_session):
        assert cart_service.remove_from_cart(555) is False

    def test_remove_line(self, make_product):
        product_id = make_product()
        line_id = cart_service.add_to_cart(product_id, 1)
        assert cart_service.remove_from_cart(line_id) is True
        assert cart_service.list_cart() == []

    def test_clear(self, make_product):
        cart_service.add_to_cart(make_product("A"), 1)
        cart_service.add_to_cart(make_product("B"), 4)

        assert cart_service.clear_cart() == 2
        assert cart_service.list_cart() == []
        assert cart_service.clear_cart() == 0


class TestMultipleCarts:

    def test_carts_are_isolated(self, make_product):
        product_id = make_product()
        till_two = cart_service.create_cart("till-2")

        cart_service.add_to_cart(product_id, 1)
        cart_service.add_to_cart(product_id, 4, cart_id=till_two)

        assert _line_for(product_id)["quantity"] == 1
        assert _line_for(product_id, till_two)["quantity"] == 4

        cart_service.clear_cart(till_two)
        assert _line_for(product_id)["quantity"] == 1

    def test_unknown_cart(self, make_product):
        product_id = make_product()
        with pytest.raises(NotFoundError):
            cart_service.add_to_cart(product_id, 1, cart_id=9999)

    def test_default_cart_is_idempotent(self, db_session):
        first = cart_service.ensure_default_cart().id
        second = cart_service.ensure_default_cart().id
        assert first == second
