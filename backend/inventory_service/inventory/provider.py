# backend/inventory_service/inventory/provider.py

import logging
from collections.abc import Sequence
from typing import Any, Dict, List, Mapping, Optional

from .contract import COLUMN_ID, CONTENT_ITEM_TYPE, CONTENT_LIST_TYPE
from .errors import InvalidField, StorageInsertFailed, UnroutableAddress, UnsupportedOperation
from .notifications import ChangeNotifier
from .router import Address, AddressKind, AddressRouter, Collection, Item
from .schemas import INSERT, UPDATE, clean
from .storage import ProductStorage

logger = logging.getLogger(__name__)

_ID_FILTER = f"{COLUMN_ID} = :id"


class ResultSet(Sequence):
    """Rows returned by a query, tagged with the address they were read from."""

    def __init__(self, rows: List[Dict[str, Any]], notification_address: Address):
        self.rows = rows
        self.notification_address = notification_address

    def __getitem__(self, index):
        return self.rows[index]

    def __len__(self):
        return len(self.rows)

    def __repr__(self):
        return f"<ResultSet(address='{self.notification_address}', rows={len(self.rows)})>"


class InventoryProvider:
    """
    Routes CRUD requests on product addresses to the storage engine.

    Inserts and updates are validated before storage is touched. Every call
    that changes at least one row sends one change notification for the
    address it was made on (the collection, for inserts).
    """

    def __init__(
        self,
        storage: ProductStorage,
        notifier: Optional[ChangeNotifier] = None,
        router: Optional[AddressRouter] = None,
    ):
        self.storage = storage
        self.notifier = notifier if notifier is not None else ChangeNotifier()
        self.router = router if router is not None else AddressRouter()

    def query(
        self,
        address,
        fields=None,
        filter: Optional[str] = None,
        filter_args: Optional[Mapping[str, Any]] = None,
        order: Optional[str] = None,
    ) -> ResultSet:
        target = self.router.match(address)
        if isinstance(target, Collection):
            rows = self.storage.query_rows(fields, filter, filter_args, order)
        elif isinstance(target, Item):
            rows = self.storage.query_rows(fields, _ID_FILTER, {"id": target.id}, order)
        else:
            raise UnroutableAddress(address)

        logger.info(f"Inventory Provider: Query on {target} returned {len(rows)} rows.")
        return ResultSet(rows, target)

    def insert(self, address, fields: Mapping[str, Any]) -> Optional[Item]:
        target = self.router.match(address)
        if not isinstance(target, Collection):
            raise UnsupportedOperation("Insertion", address)

        values = self._clean(INSERT, fields, target)
        try:
            return self._insert_product(target, values)
        except StorageInsertFailed as e:
            logger.error(f"Inventory Provider: {e}")
            return None

    def _insert_product(self, collection: Collection, values: Dict[str, Any]) -> Item:
        new_id = self.storage.insert_row(values)
        if new_id is None or new_id < 0:
            raise StorageInsertFailed(collection)

        logger.info(
            f"Inventory Provider: Product '{values['name']}' inserted with ID {new_id}."
        )
        self._notify_change(collection)
        return collection.with_id(new_id)

    def update(
        self,
        address,
        fields: Mapping[str, Any],
        filter: Optional[str] = None,
        filter_args: Optional[Mapping[str, Any]] = None,
    ) -> int:
        target = self.router.match(address)
        if isinstance(target, Item):
            filter, filter_args = _ID_FILTER, {"id": target.id}
        elif not isinstance(target, Collection):
            raise UnsupportedOperation("Update", address)

        values = self._clean(UPDATE, fields, target)
        if not values:
            return 0

        rows_updated = self.storage.update_rows(values, filter, filter_args)
        logger.info(
            f"Inventory Provider: Updated {rows_updated} rows on {target} with {values}."
        )
        if rows_updated != 0:
            self._notify_change(target)
        return rows_updated

    def delete(
        self,
        address,
        filter: Optional[str] = None,
        filter_args: Optional[Mapping[str, Any]] = None,
    ) -> int:
        target = self.router.match(address)
        if isinstance(target, Item):
            filter, filter_args = _ID_FILTER, {"id": target.id}
        elif not isinstance(target, Collection):
            raise UnsupportedOperation("Deletion", address)

        rows_deleted = self.storage.delete_rows(filter, filter_args)
        logger.info(f"Inventory Provider: Deleted {rows_deleted} rows on {target}.")
        if rows_deleted != 0:
            self._notify_change(target)
        return rows_deleted

    def _clean(self, kind: str, fields, target: Address) -> Dict[str, Any]:
        try:
            return clean(kind, fields)
        except InvalidField as e:
            logger.warning(f"Inventory Provider: Rejected {kind} on {target}: {e}")
            raise

    def resolve_kind(self, address) -> AddressKind:
        return self.router.resolve_kind(address)

    def get_type(self, address) -> str:
        """Content type of the data behind ``address``."""
        if self.resolve_kind(address) is AddressKind.ITEM:
            return CONTENT_ITEM_TYPE
        return CONTENT_LIST_TYPE

    def _notify_change(self, address: Address):
        try:
            self.notifier.notify(address)
        except Exception as e:
            # The write is already committed
            logger.error(
                f"Inventory Provider: Change notification for {address} failed: {e}",
                exc_info=True,
            )
