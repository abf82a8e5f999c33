# backend/inventory_service/inventory/models.py

from sqlalchemy import Column, Integer, String

from . import contract
from .db import Base


class Product(Base):
    __tablename__ = contract.TABLE_NAME
    # Ids of deleted rows are never handed out again
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    name = Column(String(255), nullable=False, index=True)
    price = Column(Integer, nullable=True, default=0)
    quantity = Column(Integer, nullable=True, default=0)
    supplier_name = Column(String(255), nullable=False)
    supplier_phone = Column(String(32), nullable=False)

    def __repr__(self):
        return f"<Product(id={self.id}, name='{self.name}', quantity={self.quantity}, supplier='{self.supplier_name}')>"
