"""Resource catalog served next to the sampling tool.

This module provides a fixed catalog of MCP resources with cursor-based
pagination, per-URI reads and resource templates:

- ``test://static/resource/{id}``: 100 static resources; odd ids are plain
  text, even ids are base64 blobs
- ``demo://collection/summer-specials``: a collection whose read returns one
  content entry per item, each addressed by its own item URI
- ``demo://collection/by-category/{category}``: the items of one category
- ``demo://collection/item/{id}``: a single item

Example:
    ```python
    catalog = ResourceCatalog()
    page = catalog.list_resources()
    while page.nextCursor:
        page = catalog.list_resources(page.nextCursor)
    contents = catalog.read_resource("test://static/resource/1")
    ```
"""

import base64
import binascii
import json
import logging
from dataclasses import asdict, dataclass
from typing import Dict, List, Optional, Union

from mcp import types

from agentic_sampling.core.errors import InvalidCursorError, ResourceNotFoundError

logger = logging.getLogger(__name__)

STATIC_RESOURCE_COUNT = 100
DEFAULT_PAGE_SIZE = 10

STATIC_URI_PREFIX = "test://static/resource/"
COLLECTION_URI = "demo://collection/summer-specials"
CATEGORY_URI_PREFIX = "demo://collection/by-category/"
ITEM_URI_PREFIX = "demo://collection/item/"

ResourceContents = Union[types.TextResourceContents, types.BlobResourceContents]


@dataclass(frozen=True)
class CollectionItem:
    id: int
    name: str
    price: float
    category: str

    @property
    def uri(self) -> str:
        return f"{ITEM_URI_PREFIX}{self.id}"


COLLECTION_ITEMS = (
    CollectionItem(1, "Summer Hat", 29.99, "accessories"),
    CollectionItem(2, "Beach Towel", 19.99, "accessories"),
    CollectionItem(3, "Sunglasses", 49.99, "accessories"),
    CollectionItem(4, "Flip Flops", 14.99, "footwear"),
    CollectionItem(5, "Sunscreen SPF50", 12.99, "skincare"),
)


def encode_cursor(offset: int) -> str:
    return base64.b64encode(str(offset).encode()).decode()


def decode_cursor(cursor: str) -> int:
    """Decode a listing cursor into its start offset.

    Raises:
        InvalidCursorError: If the cursor is not base64 of a non-negative integer
    """
    try:
        offset = int(base64.b64decode(cursor, validate=True).decode())
    except (binascii.Error, UnicodeDecodeError, ValueError) as e:
        raise InvalidCursorError(f"Invalid cursor: {cursor!r}") from e
    if offset < 0:
        raise InvalidCursorError(f"Invalid cursor: {cursor!r}")
    return offset


def _static_contents(index: int) -> ResourceContents:
    number = index + 1
    uri = f"{STATIC_URI_PREFIX}{number}"
    if index % 2 == 0:
        return types.TextResourceContents(
            uri=uri,
            mimeType="text/plain",
            text=f"Resource {number}: This is a plaintext resource",
        )
    blob = base64.b64encode(f"Resource {number}: This is a base64 blob".encode()).decode()
    return types.BlobResourceContents(uri=uri, mimeType="application/octet-stream", blob=blob)


def _item_contents(item: CollectionItem) -> types.TextResourceContents:
    return types.TextResourceContents(
        uri=item.uri,
        mimeType="application/json",
        text=json.dumps(asdict(item), indent=2),
    )


class ResourceCatalog:
    """Read-only catalog of static and collection resources.

    Attributes:
        page_size: Number of resources returned per listing page
    """

    def __init__(self, page_size: int = DEFAULT_PAGE_SIZE) -> None:
        if page_size < 1:
            raise ValueError("page_size must be at least 1")
        self.page_size = page_size
        self._static: List[ResourceContents] = [
            _static_contents(i) for i in range(STATIC_RESOURCE_COUNT)
        ]
        self._categories: List[str] = list(dict.fromkeys(i.category for i in COLLECTION_ITEMS))
        self._items: Dict[str, CollectionItem] = {str(i.id): i for i in COLLECTION_ITEMS}
        self.resources: List[types.Resource] = self._build_resources()

    def _build_resources(self) -> List[types.Resource]:
        resources = [
            types.Resource(uri=str(c.uri), name=f"Resource {n}", mimeType=c.mimeType)
            for n, c in enumerate(self._static, start=1)
        ]
        resources.append(types.Resource(
            uri=COLLECTION_URI,
            name="Summer Specials Collection",
            description="A collection resource that returns multiple items, each with its own URI",
            mimeType="application/json",
        ))
        resources.extend(
            types.Resource(
                uri=f"{CATEGORY_URI_PREFIX}{category}",
                name=f"Collection: {category}",
                description=f'Items in the "{category}" category',
                mimeType="application/json",
            )
            for category in self._categories
        )
        resources.extend(
            types.Resource(
                uri=item.uri,
                name=f"Item: {item.name}",
                description=f"Individual item: {item.name} (${item.price})",
                mimeType="application/json",
            )
            for item in COLLECTION_ITEMS
        )
        return resources

    def __len__(self) -> int:
        return len(self.resources)

    def list_resources(self, cursor: Optional[str] = None) -> types.ListResourcesResult:
        """Return one page of resources.

        Args:
            cursor: Opaque cursor from a previous page, or None for the first page

        Returns:
            The page; ``nextCursor`` is unset on the last page

        Raises:
            InvalidCursorError: If the cursor cannot be decoded
        """
        start = decode_cursor(cursor) if cursor else 0
        end = min(start + self.page_size, len(self.resources))
        next_cursor = encode_cursor(end) if end < len(self.resources) else None

        logger.debug("Listing resources", extra={
            "start": start,
            "end": end,
            "has_more": next_cursor is not None
        })
        return types.ListResourcesResult(
            resources=self.resources[start:end],
            nextCursor=next_cursor,
        )

    def list_templates(self) -> List[types.ResourceTemplate]:
        return [
            types.ResourceTemplate(
                uriTemplate=f"{STATIC_URI_PREFIX}{{id}}",
                name="Static Resource",
                description="A static resource with a numeric ID",
            ),
            types.ResourceTemplate(
                uriTemplate=f"{CATEGORY_URI_PREFIX}{{category}}",
                name="Collection Category",
                description="Collection items filtered by category",
                mimeType="application/json",
            ),
            types.ResourceTemplate(
                uriTemplate=f"{ITEM_URI_PREFIX}{{id}}",
                name="Collection Item",
                description="A single collection item",
                mimeType="application/json",
            ),
        ]

    def read_resource(self, uri: str) -> List[ResourceContents]:
        """Read the contents behind a URI.

        Collection URIs yield one entry per item, each carrying the item's
        own URI.

        Raises:
            ResourceNotFoundError: If the URI is not served by this catalog
        """
        uri = str(uri)
        if uri.startswith(STATIC_URI_PREFIX):
            suffix = uri[len(STATIC_URI_PREFIX):]
            if suffix.isdigit() and 1 <= int(suffix) <= len(self._static):
                return [self._static[int(suffix) - 1]]

        elif uri == COLLECTION_URI:
            return [_item_contents(item) for item in COLLECTION_ITEMS]

        elif uri.startswith(CATEGORY_URI_PREFIX):
            category = uri[len(CATEGORY_URI_PREFIX):]
            if category in self._categories:
                return [
                    _item_contents(item)
                    for item in COLLECTION_ITEMS
                    if item.category == category
                ]

        elif uri.startswith(ITEM_URI_PREFIX):
            item = self._items.get(uri[len(ITEM_URI_PREFIX):])
            if item is not None:
                return [_item_contents(item)]

        raise ResourceNotFoundError(uri)
