from storefront.schemas import Order
from tests._orders import order_payload


def test_null_id_and_paid_flag_use_defaults():
    order = Order.model_validate(order_payload(isPaid=None, _id=None))
    assert order.is_paid is False
    assert order.id == ""


def test_null_items_become_empty():
    assert Order.model_validate({"items": None}).items == []


def test_numeric_address_fields_are_text():
    order = Order.model_validate(order_payload())
    assert order.address.zipcode == "122001"
    assert order.address.full_name == "Asha Verma"
