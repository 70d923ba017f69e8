import pytest

from sales_calculator.exceptions import NotFoundError
from sales_calculator.services import customers_service, transactions_service
from sales_calculator.services.transactions_service import ANONYMOUS_CUSTOMER_NAME


class TestCustomerStore:

    def test_new_customer_starts_with_zero_balance(self, make_customer):
        customer_id = make_customer("Jane Smith", phone_number="+0987654321",
                                    email="jane@example.com", address="456 Oak Ave, Town")

        customer = customers_service.get_customer(customer_id)
        assert customer["full_name"] == "Jane Smith"
        assert customer["phone_number"] == "+0987654321"
        assert customer["email"] == "jane@example.com"
        assert customer["address"] == "456 Oak Ave, Town"
        assert customer["profile_image"] is None
        assert customer["balance_cents"] == 0

    def test_balance_cannot_be_set_through_create_or_update(self, db_session):
        customer_id = customers_service.create_customer(
            patch={"full_name": "Sneaky", "balance_cents": 100000}
        )
        assert customers_service.get_customer(customer_id)["balance_cents"] == 0

        customers_service.update_customer(customer_id=customer_id, patch={"balance_cents": 5})
        assert customers_service.get_customer(customer_id)["balance_cents"] == 0

    def test_partial_update(self, make_customer):
        customer_id = make_customer("John Doe", email="john@example.com", phone_number="+1234567890")

        updated = customers_service.update_customer(
            customer_id=customer_id, patch={"address": "123 Main St, City"}
        )

        assert updated["address"] == "123 Main St, City"
        assert updated["email"] == "john@example.com"
        assert updated["phone_number"] == "+1234567890"

    def test_list_is_newest_first(self, make_customer):
        a = make_customer("A")
        b = make_customer("B")
        assert [c["id"] for c in customers_service.list_customers()] == [b, a]

    def test_update_missing_customer(self, db_session):
        with pytest.raises(NotFoundError):
            customers_service.update_customer(customer_id=9999, patch={"full_name": "Ghost"})

    def test_delete_keeps_transaction_history(self, make_customer):
        customer_id = make_customer("Leaving Soon")
        tx_id = transactions_service.record_transaction("credit", 1500, customer_id=customer_id)

        customers_service.delete_customer(customer_id=customer_id)

        assert customer_id not in [c["id"] for c in customers_service.list_customers()]
        remaining = transactions_service.list_transactions()
        assert [t["id"] for t in remaining] == [tx_id]
        assert remaining[0]["customer_id"] == customer_id
        assert remaining[0]["customer_name"] == ANONYMOUS_CUSTOMER_NAME

        history = transactions_service.list_customer_transactions(customer_id)
        assert [t["id"] for t in history] == [tx_id]

    def test_delete_missing_customer(self, db_session):
        with pytest.raises(NotFoundError):
            customers_service.delete_customer(customer_id=9999)
