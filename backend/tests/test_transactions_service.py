import pytest

from sales_calculator.exceptions import NotFoundError
from sales_calculator.services import customers_service, transactions_service
from sales_calculator.services.transactions_service import ANONYMOUS_CUSTOMER_NAME
from sales_calculator.validation import MAX_AMOUNT_CENTS, ValidationError


class TestRecordTransaction:

    @pytest.mark.smoke
    def test_running_balance(self, make_customer):
        customer_id = make_customer()

        transactions_service.record_transaction("credit", 10000, customer_id=customer_id)
        transactions_service.record_transaction("debit", 3000, customer_id=customer_id)
        transactions_service.record_transaction("sale", 2000, customer_id=customer_id,
                                                payment_method="cash")

        assert customers_service.get_customer(customer_id)["balance_cents"] == 5000
        assert transactions_service.compute_customer_balance(customer_id) == 5000

    def test_sale_can_be_excluded_from_balance(self, app, make_customer, monkeypatch):
        monkeypatch.setitem(app.config, "SALE_AFFECTS_BALANCE", False)
        customer_id = make_customer()

        transactions_service.record_transaction("credit", 10000, customer_id=customer_id)
        transactions_service.record_transaction("debit", 3000, customer_id=customer_id)
        transactions_service.record_transaction("sale", 2000, customer_id=customer_id)

        assert customers_service.get_customer(customer_id)["balance_cents"] == 7000
        assert transactions_service.compute_customer_balance(customer_id) == 7000

    @pytest.mark.parametrize("amount", [0, -500])
    def test_amount_must_be_positive(self, make_customer, amount):
        customer_id = make_customer()
        with pytest.raises(ValidationError):
            transactions_service.record_transaction("credit", amount, customer_id=customer_id)
        assert transactions_service.list_transactions() == []
        assert customers_service.get_customer(customer_id)["balance_cents"] == 0

    def test_amount_above_limit(self, make_customer):
        customer_id = make_customer()
        with pytest.raises(ValidationError):
            transactions_service.record_transaction("credit", MAX_AMOUNT_CENTS + 1, customer_id=customer_id)
        assert transactions_service.list_transactions() == []

    def test_unknown_type(self, db_session):
        with pytest.raises(ValidationError):
            transactions_service.record_transaction("refund", 100)

    def test_unknown_payment_method(self, db_session):
        with pytest.raises(ValidationError):
            transactions_service.record_transaction("sale", 100, payment_method="cheque")

    def test_unknown_customer_records_nothing(self, db_session):
        with pytest.raises(NotFoundError):
            transactions_service.record_transaction("credit", 100, customer_id=4040)
        assert transactions_service.list_transactions() == []

    def test_anonymous_sale(self, db_session):
        tx_id = transactions_service.record_transaction("sale", 1999, payment_method="card")

        [tx] = transactions_service.list_transactions()
        assert tx["id"] == tx_id
        assert tx["customer_id"] is None
        assert tx["customer_name"] == ANONYMOUS_CUSTOMER_NAME
        assert tx["payment_method"] == "card"


class TestListTransactions:

    def test_newest_first_with_customer_name(self, make_customer):
        customer_id = make_customer("Jane Smith")
        first = transactions_service.record_transaction("credit", 100, customer_id=customer_id)
        second = transactions_service.record_transaction("debit", 50, customer_id=customer_id,
                                                         note="Correction")
        third = transactions_service.record_transaction("sale", 75)

        listed = transactions_service.list_transactions()
        assert [t["id"] for t in listed] == [third, second, first]
        assert listed[1]["customer_name"] == "Jane Smith"
        assert listed[1]["reference_note"] == "Correction"

    def test_filtered_by_customer(self, make_customer):
        jane = make_customer("Jane Smith")
        john = make_customer("John Doe")
        a = transactions_service.record_transaction("credit", 100, customer_id=jane)
        transactions_service.record_transaction("credit", 200, customer_id=john)
        b = transactions_service.record_transaction("debit", 40, customer_id=jane)

        listed = transactions_service.list_customer_transactions(jane)
        assert [t["id"] for t in listed] == [b, a]
        assert all(t["customer_name"] == "Jane Smith" for t in listed)

    def test_balance_delta_policy(self, db_session):
        assert transactions_service.balance_delta("credit", 100) == 100
        assert transactions_service.balance_delta("debit", 100) == -100
        assert transactions_service.balance_delta("sale", 100, sale_affects_balance=True) == -100
        assert transactions_service.balance_delta("sale", 100, sale_affects_balance=False) == 0
