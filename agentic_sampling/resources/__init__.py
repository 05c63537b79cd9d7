"""Resource catalog and subscriptions."""

from .catalog import (
    COLLECTION_ITEMS,
    DEFAULT_PAGE_SIZE,
    ResourceCatalog,
    decode_cursor,
    encode_cursor,
)
from .subscriptions import SubscriptionManager

__all__ = [
    "COLLECTION_ITEMS",
    "DEFAULT_PAGE_SIZE",
    "ResourceCatalog",
    "SubscriptionManager",
    "decode_cursor",
    "encode_cursor",
]
