# backend/inventory_service/inventory/router.py

import enum
import re
from dataclasses import dataclass
from typing import Optional, Union
from urllib.parse import urlparse

from .contract import CONTENT_AUTHORITY, CONTENT_SCHEME, PATH_PRODUCTS
from .errors import UnrecognizedAddress

_ID_SEGMENT = re.compile(r"[0-9]+")


def _valid_id(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value >= 0


class AddressKind(str, enum.Enum):
    COLLECTION = "collection"
    ITEM = "item"


@dataclass(frozen=True)
class Collection:
    """Address of the whole product table."""

    authority: str = CONTENT_AUTHORITY
    path: str = PATH_PRODUCTS

    kind = AddressKind.COLLECTION

    @property
    def uri(self) -> str:
        return f"{CONTENT_SCHEME}://{self.authority}/{self.path}"

    def with_id(self, item_id: int) -> "Item":
        return Item(int(item_id), self.authority, self.path)

    def __str__(self):
        return self.uri


@dataclass(frozen=True)
class Item:
    """Address of exactly one product, identified by its surrogate id."""

    id: int
    authority: str = CONTENT_AUTHORITY
    path: str = PATH_PRODUCTS

    kind = AddressKind.ITEM

    @property
    def collection(self) -> Collection:
        return Collection(self.authority, self.path)

    @property
    def uri(self) -> str:
        return f"{self.collection.uri}/{self.id}"

    def __str__(self):
        return self.uri


Address = Union[Collection, Item]


class AddressRouter:
    """
    Maps a logical address to Collection or Item(id).

    Two shapes are recognized, with or without the content:// scheme:
    <authority>/<path> and <authority>/<path>/<digits>. The table is fixed
    when the router is built.
    """

    def __init__(self, authority: str = CONTENT_AUTHORITY, path: str = PATH_PRODUCTS):
        self.authority = authority
        self.path = path
        self._path_segments = [s for s in path.split("/") if s]

    @property
    def collection(self) -> Collection:
        return Collection(self.authority, self.path)

    def match(self, address) -> Optional[Address]:
        if isinstance(address, (Collection, Item)):
            if (address.authority, address.path) != (self.authority, self.path):
                return None
            if isinstance(address, Item) and not _valid_id(address.id):
                return None
            return address
        if not isinstance(address, str) or any(ch.isspace() for ch in address):
            return None

        parsed = urlparse(address)
        if parsed.scheme:
            if parsed.scheme != CONTENT_SCHEME or parsed.query or parsed.fragment:
                return None
            authority, raw_path = parsed.netloc, parsed.path
        else:
            authority, _, raw_path = address.partition("/")

        if authority != self.authority:
            return None

        segments = [s for s in raw_path.split("/") if s]
        size = len(self._path_segments)
        if segments[:size] != self._path_segments:
            return None

        rest = segments[size:]
        if not rest:
            return self.collection
        if len(rest) == 1 and _ID_SEGMENT.fullmatch(rest[0]):
            return self.collection.with_id(int(rest[0]))
        return None

    def classify(self, address) -> Address:
        matched = self.match(address)
        if matched is None:
            raise UnrecognizedAddress(address)
        return matched

    def resolve_kind(self, address) -> AddressKind:
        return self.classify(address).kind
