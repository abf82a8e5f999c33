# backend/inventory_service/inventory/storage.py

import logging
from typing import Any, Dict, List, Mapping, Optional, Sequence

from sqlalchemy import delete, insert, select, text, update
from sqlalchemy.exc import SQLAlchemyError

from .db import Base, SessionLocal
from .errors import InvalidField
from .models import Product

logger = logging.getLogger(__name__)

# Returned by insert_row when the engine could not persist the row
INSERT_FAILED = -1


class ProductStorage:
    """
    Table-level primitives over the inventory table.

    Filters are SQL boolean expressions using named placeholders
    (``"quantity < :limit"``) bound from ``filter_args``. Every call opens
    its own session and commits once, so each operation is atomic on its
    own and nothing spans calls.
    """

    def __init__(self, session_factory=SessionLocal):
        self.session_factory = session_factory

    @property
    def engine(self):
        return self.session_factory.kw["bind"]

    def open(self):
        Base.metadata.create_all(bind=self.engine, tables=[Product.__table__])
        logger.info(
            f"Inventory Storage: Ensured table '{Product.__tablename__}' exists."
        )
        return self

    def _columns(self, fields: Optional[Sequence[str]]):
        table = Product.__table__
        if not fields:
            return list(table.columns)
        columns = []
        for name in fields:
            if name not in table.columns:
                raise InvalidField(name, "Unknown column")
            columns.append(table.columns[name])
        return columns

    @staticmethod
    def _where(statement, filter: Optional[str], filter_args: Optional[Mapping[str, Any]]):
        if filter:
            statement = statement.where(text(filter).bindparams(**dict(filter_args or {})))
        return statement

    def query_rows(
        self,
        fields: Optional[Sequence[str]] = None,
        filter: Optional[str] = None,
        filter_args: Optional[Mapping[str, Any]] = None,
        order: Optional[str] = None,
    ) -> List[Dict[str, Any]]:
        statement = self._where(select(*self._columns(fields)), filter, filter_args)
        if order:
            statement = statement.order_by(text(order))
        with self.session_factory() as db:
            result = db.execute(statement)
            return [dict(row) for row in result.mappings()]

    def insert_row(self, fields: Mapping[str, Any]) -> int:
        with self.session_factory() as db:
            try:
                result = db.execute(insert(Product.__table__).values(**dict(fields)))
                db.commit()
            except SQLAlchemyError as e:
                db.rollback()
                logger.error(
                    f"Inventory Storage: Error inserting row: {e}", exc_info=True
                )
                return INSERT_FAILED
            return result.inserted_primary_key[0]

    def update_rows(
        self,
        fields: Mapping[str, Any],
        filter: Optional[str] = None,
        filter_args: Optional[Mapping[str, Any]] = None,
    ) -> int:
        statement = self._where(update(Product.__table__), filter, filter_args).values(**dict(fields))
        return self._execute_write(statement, "updating")

    def delete_rows(
        self,
        filter: Optional[str] = None,
        filter_args: Optional[Mapping[str, Any]] = None,
    ) -> int:
        statement = self._where(delete(Product.__table__), filter, filter_args)
        return self._execute_write(statement, "deleting")

    def _execute_write(self, statement, action: str) -> int:
        with self.session_factory() as db:
            try:
                result = db.execute(statement)
                db.commit()
            except SQLAlchemyError as e:
                db.rollback()
                logger.error(
                    f"Inventory Storage: Error {action} rows: {e}", exc_info=True
                )
                raise
            return result.rowcount
