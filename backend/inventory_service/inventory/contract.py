# backend/inventory_service/inventory/contract.py

CONTENT_SCHEME = "content"
CONTENT_AUTHORITY = "com.example.android.inventory"
PATH_PRODUCTS = "products"

BASE_CONTENT_URI = f"{CONTENT_SCHEME}://{CONTENT_AUTHORITY}"
CONTENT_URI = f"{BASE_CONTENT_URI}/{PATH_PRODUCTS}"

# Content types returned for the collection and for a single product
CONTENT_LIST_TYPE = f"vnd.android.cursor.dir/{CONTENT_AUTHORITY}/{PATH_PRODUCTS}"
CONTENT_ITEM_TYPE = f"vnd.android.cursor.item/{CONTENT_AUTHORITY}/{PATH_PRODUCTS}"

TABLE_NAME = "inventory"

COLUMN_ID = "id"
COLUMN_NAME = "name"
COLUMN_PRICE = "price"
COLUMN_QUANTITY = "quantity"
COLUMN_SUPPLIER_NAME = "supplier_name"
COLUMN_SUPPLIER_PHONE = "supplier_phone"

ALL_COLUMNS = (
    COLUMN_ID,
    COLUMN_NAME,
    COLUMN_PRICE,
    COLUMN_QUANTITY,
    COLUMN_SUPPLIER_NAME,
    COLUMN_SUPPLIER_PHONE,
)
