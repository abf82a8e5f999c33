# backend/inventory_service/tests/conftest.py

import logging
import os

# Keep the application's own store in memory while the suite runs
os.environ.setdefault("INVENTORY_DATABASE_URL", "sqlite://")

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from inventory.notifications import ChangeNotifier
from inventory.provider import InventoryProvider
from inventory.storage import ProductStorage

# Suppress noisy logs from SQLAlchemy during tests for cleaner output
logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    yield engine
    engine.dispose()


@pytest.fixture
def storage(engine):
    session_factory = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    return ProductStorage(session_factory).open()


@pytest.fixture
def notifier():
    return ChangeNotifier()


@pytest.fixture
def provider(storage, notifier):
    return InventoryProvider(storage, notifier)


@pytest.fixture
def product_values():
    return {
        "name": "Thermal Paste",
        "price": 12,
        "quantity": 40,
        "supplier_name": "Arctic Supplies",
        "supplier_phone": "0755123456",
    }
