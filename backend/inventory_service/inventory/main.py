# backend/inventory_service/inventory/main.py

import logging
import os
import sys
import time
from typing import Any, Dict, List, Literal, Optional

from fastapi import Body, Depends, FastAPI, HTTPException, Query, Response, status
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.exc import OperationalError

from .contract import CONTENT_ITEM_TYPE, CONTENT_LIST_TYPE
from .db import SessionLocal
from .errors import InvalidField
from .provider import InventoryProvider
from .schemas import ProductResponse
from .storage import ProductStorage

# --- Standard Logging Configuration ---
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(levelname)s - %(name)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)
logger = logging.getLogger(__name__)

# Suppress noisy logs from third-party libraries for cleaner output
logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
logging.getLogger("uvicorn.error").setLevel(logging.INFO)

STARTUP_RETRIES = int(os.getenv("INVENTORY_STARTUP_RETRIES", "10"))
STARTUP_RETRY_DELAY = int(os.getenv("INVENTORY_STARTUP_RETRY_DELAY", "5"))

provider = InventoryProvider(ProductStorage(SessionLocal))


def get_provider() -> InventoryProvider:
    return provider


# --- FastAPI Application Setup ---
app = FastAPI(
    title="Inventory Service API",
    description="Validated CRUD over the local inventory table, with change notifications.",
    version="1.0.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Use specific origins in production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# --- FastAPI Event Handlers ---
@app.on_event("startup")
async def startup_event():
    for i in range(STARTUP_RETRIES):
        try:
            logger.info(
                f"Inventory Service: Opening the local store (attempt {i+1}/{STARTUP_RETRIES})..."
            )
            provider.storage.open()
            break
        except OperationalError as e:
            logger.warning(f"Inventory Service: Failed to open the local store: {e}")
            if i < STARTUP_RETRIES - 1:
                logger.info(
                    f"Inventory Service: Retrying in {STARTUP_RETRY_DELAY} seconds..."
                )
                time.sleep(STARTUP_RETRY_DELAY)
            else:
                logger.critical(
                    f"Inventory Service: Could not open the local store after {STARTUP_RETRIES} attempts. Exiting application."
                )
                sys.exit(1)


@app.get("/", status_code=status.HTTP_200_OK, summary="Root endpoint")
async def read_root():
    return {"message": "Welcome to the Inventory Service!"}


@app.get("/health", status_code=status.HTTP_200_OK, summary="Health check endpoint")
async def health_check():
    return {"status": "ok", "service": "inventory-service"}


@app.get("/products/types", summary="Content types served by the inventory")
def content_types():
    return {"collection": CONTENT_LIST_TYPE, "item": CONTENT_ITEM_TYPE}


@app.get(
    "/products/",
    response_model=List[ProductResponse],
    summary="Retrieve the inventory",
)
def list_products(
    inventory: InventoryProvider = Depends(get_provider),
    search: Optional[str] = Query(None, max_length=255),
    order_by: Literal["id", "name", "price", "quantity"] = "id",
    descending: bool = False,
):
    logger.info(
        f"Inventory Service: Listing products search='{search}', order_by={order_by}, descending={descending}"
    )
    filter, filter_args = None, None
    if search:
        filter, filter_args = "name LIKE :pattern", {"pattern": f"%{search}%"}
    order = f"{order_by} {'DESC' if descending else 'ASC'}"
    return list(
        inventory.query(inventory.router.collection, filter=filter, filter_args=filter_args, order=order)
    )


def _fetch_one(inventory: InventoryProvider, product_id: int):
    rows = inventory.query(inventory.router.collection.with_id(product_id))
    return rows[0] if rows else None


@app.get(
    "/products/{product_id}",
    response_model=ProductResponse,
    summary="Retrieve a single product by ID",
)
def get_product(product_id: int, inventory: InventoryProvider = Depends(get_provider)):
    product = _fetch_one(inventory, product_id)
    if product is None:
        logger.warning(f"Inventory Service: Product with ID {product_id} not found.")
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Product not found"
        )
    return product


@app.post(
    "/products/",
    response_model=ProductResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a new product",
)
def create_product(
    product: Dict[str, Any] = Body(..., description="Fields of the new product."),
    inventory: InventoryProvider = Depends(get_provider),
):
    logger.info(f"Inventory Service: Creating product: {product.get('name')}")
    try:
        item = inventory.insert(inventory.router.collection, product)
    except InvalidField as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    if item is None:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Could not create product.",
        )
    return _fetch_one(inventory, item.id)


@app.patch(
    "/products/{product_id}",
    response_model=ProductResponse,
    summary="Update fields of an existing product",
)
def update_product(
    product_id: int,
    changes: Dict[str, Any] = Body(..., description="Fields to change; others are left as they are."),
    inventory: InventoryProvider = Depends(get_provider),
):
    logger.info(f"Inventory Service: Updating product {product_id} with {changes}")
    try:
        inventory.update(inventory.router.collection.with_id(product_id), changes)
    except InvalidField as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    updated = _fetch_one(inventory, product_id)
    if updated is None:
        logger.warning(
            f"Inventory Service: Attempted to update non-existent product with ID {product_id}."
        )
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Product not found"
        )
    return updated


@app.delete(
    "/products/{product_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a product by ID",
)
def delete_product(product_id: int, inventory: InventoryProvider = Depends(get_provider)):
    deleted = inventory.delete(inventory.router.collection.with_id(product_id))
    if deleted == 0:
        logger.warning(
            f"Inventory Service: Attempted to delete non-existent product with ID {product_id}."
        )
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Product not found"
        )
    return Response(status_code=status.HTTP_204_NO_CONTENT)
