# backend/inventory_service/inventory/db.py

import os

from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker


DATABASE_URL = os.getenv("INVENTORY_DATABASE_URL", "sqlite:///./inventory.db")
DB_ECHO = os.getenv("INVENTORY_DB_ECHO", "false").lower() in ("1", "true", "yes")


def make_engine(url: str = DATABASE_URL, echo: bool = DB_ECHO):
    connect_args = {}
    if url.startswith("sqlite"):
        # The local store is shared by the API worker threads
        connect_args["check_same_thread"] = False
    return create_engine(url, echo=echo, connect_args=connect_args)


engine = make_engine()
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()
