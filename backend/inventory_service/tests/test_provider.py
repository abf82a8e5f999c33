# backend/inventory_service/tests/test_provider.py

import logging
from unittest.mock import MagicMock

import pytest

from inventory.contract import CONTENT_ITEM_TYPE, CONTENT_LIST_TYPE, CONTENT_URI
from inventory.errors import (
    InvalidField,
    UnrecognizedAddress,
    UnroutableAddress,
    UnsupportedOperation,
)
from inventory.provider import InventoryProvider
from inventory.router import AddressKind, Collection, Item
from inventory.storage import INSERT_FAILED


@pytest.fixture
def observer(notifier):
    observer = MagicMock()
    notifier.register(Collection(), observer)
    return observer


def _count(provider):
    return len(provider.query(CONTENT_URI))


# --- Insert ---


def test_insert_returns_new_item_and_notifies(provider, observer, product_values):
    item = provider.insert(CONTENT_URI, product_values)

    assert isinstance(item, Item)
    rows = provider.query(CONTENT_URI)
    assert len(rows) == 1
    assert rows[0] == {"id": item.id, **product_values}
    observer.assert_called_once_with(Collection())


def test_insert_assigns_unused_ids(provider, product_values):
    first = provider.insert(CONTENT_URI, product_values)
    provider.delete(first)
    second = provider.insert(CONTENT_URI, product_values)
    assert second.id != first.id


def test_insert_applies_defaults_for_missing_numbers(provider, product_values):
    del product_values["price"]
    del product_values["quantity"]
    item = provider.insert(CONTENT_URI, product_values)

    row = provider.query(item)[0]
    assert row["price"] == 0
    assert row["quantity"] == 0


@pytest.mark.parametrize("name", [None, ""])
def test_insert_without_name_leaves_storage_unchanged(provider, observer, product_values, name):
    product_values["name"] = name
    with pytest.raises(InvalidField) as exc_info:
        provider.insert(CONTENT_URI, product_values)

    assert exc_info.value.field == "name"
    assert _count(provider) == 0
    observer.assert_not_called()


def test_insert_price_boundary(provider, product_values):
    product_values["price"] = -1
    with pytest.raises(InvalidField) as exc_info:
        provider.insert(CONTENT_URI, product_values)
    assert exc_info.value.field == "price"

    product_values["price"] = 0
    assert provider.insert(CONTENT_URI, product_values) is not None


def test_rejected_input_is_logged(provider, product_values, caplog):
    product_values["price"] = -1
    with caplog.at_level(logging.WARNING, logger="inventory.provider"):
        with pytest.raises(InvalidField):
            provider.insert(CONTENT_URI, product_values)
        with pytest.raises(InvalidField):
            provider.update(CONTENT_URI + "/1", {"name": None})

    warnings = [r for r in caplog.records if r.levelno == logging.WARNING]
    assert len(warnings) == 2
    assert "price" in warnings[0].getMessage()
    assert "name" in warnings[1].getMessage()


def test_invalid_insert_never_reaches_storage(product_values):
    storage = MagicMock()
    provider = InventoryProvider(storage)
    product_values["quantity"] = -2

    with pytest.raises(InvalidField):
        provider.insert(CONTENT_URI, product_values)
    storage.insert_row.assert_not_called()


@pytest.mark.parametrize("address", [CONTENT_URI + "/3", "content://elsewhere/products"])
def test_insert_only_on_the_collection(provider, product_values, address):
    with pytest.raises(UnsupportedOperation):
        provider.insert(address, product_values)


def test_storage_failure_returns_none_without_notifying(product_values):
    storage, notifier = MagicMock(), MagicMock()
    storage.insert_row.return_value = INSERT_FAILED
    provider = InventoryProvider(storage, notifier)

    assert provider.insert(CONTENT_URI, product_values) is None
    notifier.notify.assert_not_called()


def test_notifier_failure_does_not_undo_insert(storage, product_values):
    notifier = MagicMock()
    notifier.notify.side_effect = RuntimeError("observer registry is down")
    provider = InventoryProvider(storage, notifier)

    item = provider.insert(CONTENT_URI, product_values)
    assert item is not None
    assert len(provider.query(item)) == 1


# --- Query ---


def test_query_missing_item_is_empty(provider):
    rows = provider.query(CONTENT_URI + "/99")
    assert len(rows) == 0
    assert rows.notification_address == Item(99)


def test_query_item_ignores_caller_filter(provider, product_values):
    item = provider.insert(CONTENT_URI, product_values)
    rows = provider.query(item, filter="quantity > :floor", filter_args={"floor": 1000})
    assert [row["id"] for row in rows] == [item.id]


def test_query_collection_projection_filter_and_order(provider, product_values):
    for name, quantity in [("Fan", 3), ("Cable", 10), ("Board", 1)]:
        provider.insert(CONTENT_URI, {**product_values, "name": name, "quantity": quantity})

    rows = provider.query(
        CONTENT_URI,
        fields=["name", "quantity"],
        filter="quantity < :limit",
        filter_args={"limit": 5},
        order="name ASC",
    )
    assert list(rows) == [{"name": "Board", "quantity": 1}, {"name": "Fan", "quantity": 3}]
    assert rows.notification_address == Collection()


def test_query_unknown_column(provider):
    with pytest.raises(InvalidField) as exc_info:
        provider.query(CONTENT_URI, fields=["colour"])
    assert exc_info.value.field == "colour"


def test_query_unroutable_address(provider):
    with pytest.raises(UnroutableAddress):
        provider.query("content://com.example.android.inventory/suppliers")


def test_query_rejects_negative_item_ids(provider):
    with pytest.raises(UnroutableAddress):
        provider.query(Item(-3))


# --- Update ---


def test_empty_update_is_a_no_op(observer):
    storage = MagicMock()
    provider = InventoryProvider(storage)
    provider.notifier.register(Collection(), observer)

    assert provider.update(CONTENT_URI, {}, filter="1 = 1") == 0
    storage.update_rows.assert_not_called()
    observer.assert_not_called()


def test_update_quantity_round_trip(provider, observer, product_values):
    item = provider.insert(CONTENT_URI, product_values)
    observer.reset_mock()

    assert provider.update(item, {"quantity": 3}) == 1
    assert provider.query(item)[0]["quantity"] == 3
    observer.assert_called_once_with(item)


def test_update_item_ignores_caller_filter(provider, product_values):
    first = provider.insert(CONTENT_URI, product_values)
    second = provider.insert(CONTENT_URI, {**product_values, "name": "Second"})

    assert provider.update(first, {"price": 99}, filter="id = :other", filter_args={"other": second.id}) == 1
    assert provider.query(first)[0]["price"] == 99
    assert provider.query(second)[0]["price"] == product_values["price"]


def test_bulk_update_on_collection(provider, product_values):
    for quantity in (0, 0, 8):
        provider.insert(CONTENT_URI, {**product_values, "quantity": quantity})

    changed = provider.update(
        CONTENT_URI, {"supplier_name": "Restock Ltd"}, filter="quantity = :qty", filter_args={"qty": 0}
    )
    assert changed == 2
    restocked = provider.query(CONTENT_URI, filter="supplier_name = :s", filter_args={"s": "Restock Ltd"})
    assert len(restocked) == 2


def test_update_of_missing_item_does_not_notify(provider, observer):
    assert provider.update(CONTENT_URI + "/404", {"name": "Ghost"}) == 0
    observer.assert_not_called()


@pytest.mark.parametrize(
    "changes, field",
    [
        ({"name": None}, "name"),
        ({"price": -1}, "price"),
        ({"quantity": -1}, "quantity"),
        ({"supplier_phone": None}, "supplier_phone"),
    ],
)
def test_invalid_update_leaves_row_untouched(provider, product_values, changes, field):
    item = provider.insert(CONTENT_URI, product_values)
    with pytest.raises(InvalidField) as exc_info:
        provider.update(item, changes)

    assert exc_info.value.field == field
    assert provider.query(item)[0] == {"id": item.id, **product_values}


def test_update_unknown_address(provider):
    with pytest.raises(UnsupportedOperation):
        provider.update("content://com.example.android.inventory/products/x", {"name": "A"})


# --- Delete ---


def test_delete_non_matching_filter(provider, observer, product_values):
    provider.insert(CONTENT_URI, product_values)
    observer.reset_mock()

    assert provider.delete(CONTENT_URI, filter="name = :name", filter_args={"name": "Nothing"}) == 0
    observer.assert_not_called()


def test_delete_single_item(provider, observer, product_values):
    item = provider.insert(CONTENT_URI, product_values)
    observer.reset_mock()

    assert provider.delete(item) == 1
    observer.assert_called_once_with(item)
    assert len(provider.query(item)) == 0


def test_delete_whole_collection(provider, product_values):
    for _ in range(3):
        provider.insert(CONTENT_URI, product_values)
    assert provider.delete(CONTENT_URI) == 3
    assert _count(provider) == 0


def test_delete_unknown_address(provider):
    with pytest.raises(UnsupportedOperation):
        provider.delete("content://com.example.android.inventory/products/1/2")


# --- Kind / type ---


def test_resolve_kind_and_type(provider):
    assert provider.resolve_kind(CONTENT_URI) is AddressKind.COLLECTION
    assert provider.resolve_kind(CONTENT_URI + "/1") is AddressKind.ITEM
    assert provider.get_type(CONTENT_URI) == CONTENT_LIST_TYPE
    assert provider.get_type(CONTENT_URI + "/1") == CONTENT_ITEM_TYPE


def test_resolve_kind_of_unknown_address(provider):
    with pytest.raises(UnrecognizedAddress):
        provider.resolve_kind("content://com.example.android.inventory/orders")
    with pytest.raises(UnrecognizedAddress):
        provider.get_type("content://com.example.android.inventory/orders")
