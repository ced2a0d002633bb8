"""HTTP client for the Notion API."""

from contextlib import contextmanager
from typing import Annotated, Any, Dict, Generator, List, Optional, Type, Union
from urllib.parse import quote

import httpx
from loguru import logger
from pydantic import Discriminator, Field, TypeAdapter, ValidationError

from . import __version__
from .blocks import Block
from .database import Database
from .errors import (
    BlockNotFoundError,
    DatabaseNotFoundError,
    DecodeError,
    NotFoundError,
    PageNotFoundError,
    UserNotFoundError,
    raise_for_status,
)
from .filters import Filter, SearchFilter, SearchSort, Sort
from .page import Page
from .properties import PropertyData
from .settings import settings
from .types import ObjectList, User

DEFAULT_PAGE_SIZE = 100

SearchResult = Annotated[Union[Page, Database], Discriminator("object")]


class PropertyItemList(ObjectList[Dict[str, Any]]):
    """Paginated property item response; ``property_item`` describes the whole."""

    property_item: Dict[str, Any] = Field(default_factory=dict)


_USER = TypeAdapter(User)
_USER_LIST = TypeAdapter(ObjectList[User])
_DATABASE = TypeAdapter(Database)
_DATABASE_LIST = TypeAdapter(ObjectList[Database])
_PAGE = TypeAdapter(Page)
_PAGE_LIST = TypeAdapter(ObjectList[Page])
_BLOCK = TypeAdapter(Block)
_BLOCK_LIST = TypeAdapter(ObjectList[Block])
_SEARCH_LIST = TypeAdapter(ObjectList[SearchResult])
_PROPERTY = TypeAdapter(PropertyData)
_PROPERTY_ITEM = TypeAdapter(Dict[str, Any])
_PROPERTY_ITEM_LIST = TypeAdapter(PropertyItemList)

# Block fields the API does not accept on update.
_BLOCK_UPDATABLE = ("archived",)


# Property types whose paginated items each carry one element of the list.
_LIST_TYPES = ("title", "rich_text", "people", "relation")


def _as_value(item: Dict[str, Any]) -> Dict[str, Any]:
    ptype = item.get("type")
    if ptype in _LIST_TYPES and not isinstance(item.get(ptype), list):
        return {**item, ptype: [item.get(ptype)]}
    return item


def _merge_property_items(summary: Dict[str, Any], items: List[Dict[str, Any]]) -> Dict[str, Any]:
    """Fold a paginated property item list back into a single property value."""
    ptype = summary.get("type")
    if ptype == "rollup":
        value: Any = dict(summary.get("rollup") or {})
        value["array"] = [_as_value(item) for item in items]
    else:
        value = [item.get(ptype) for item in items]
    return {"id": summary.get("id"), "type": ptype, ptype: value}


class NotionClient:
    """Client for the Notion REST API.

    Every operation is a blocking call. List operations follow the cursor
    until ``has_more`` is false and return all results in order.
    """

    API_VERSION = "2022-06-28"  # stable version
    USER_AGENT = f"notion-api-python/{__version__}"

    def __init__(
        self,
        token: Optional[str] = None,
        base_url: Optional[str] = None,
        http_client: Optional[httpx.Client] = None,
        page_size: Optional[int] = None,
        timeout: Optional[float] = None,
    ) -> None:
        """Initialize the client.

        Args:
            token: Notion API token. Without one (and without http_client), settings.token
                (NOTION_TOKEN) is used.
            base_url: API host; the path is always /v1. Defaults to NOTION_BASE_URL.
            http_client: A preconfigured httpx.Client to reuse. It is never closed here,
                and may carry its own authentication instead of a token.
            page_size: Results requested per page on list operations.
            timeout: Seconds before a request times out when no http_client is given.
        """
        # A caller-supplied client brings its own credentials.
        self.token = token or (settings.token if http_client is None else None)
        self.http_client = http_client
        if not self.token and http_client is None:
            raise RuntimeError("NOTION_TOKEN not set")

        base = httpx.URL(base_url or settings.base_url)
        self.api_base = str(base.copy_with(path="/v1"))
        self.page_size = page_size or settings.page_size or DEFAULT_PAGE_SIZE
        self.timeout = timeout if timeout is not None else settings.timeout

    # Request builder

    def _headers(self, has_body: bool = False) -> Dict[str, str]:
        """Get the headers required for Notion API requests."""
        headers = {
            "Notion-Version": self.API_VERSION,
            "User-Agent": self.USER_AGENT,
        }
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        if has_body:
            headers["Content-Type"] = "application/json"
        return headers

    def _url(self, *segments: str) -> str:
        """Join path segments onto the API base, each quoted as one segment."""
        return "/".join([self.api_base] + [quote(s, safe="") for s in segments])

    @contextmanager
    def _session(self) -> Generator[httpx.Client, None, None]:
        if self.http_client is not None:
            yield self.http_client
        else:
            with httpx.Client(timeout=self.timeout) as client:
                yield client

    def _send(
        self,
        client: httpx.Client,
        method: str,
        url: str,
        not_found: Type[NotFoundError],
        params: Optional[Dict[str, Any]] = None,
        json: Optional[Dict[str, Any]] = None,
    ) -> httpx.Response:
        logger.debug(f"[notion] {method} {url}")
        r = client.request(
            method, url, headers=self._headers(json is not None), params=params, json=json
        )
        raise_for_status(r, not_found)
        return r

    @staticmethod
    def _decode(adapter: TypeAdapter, response: httpx.Response, operation: str) -> Any:
        try:
            return adapter.validate_json(response.content)
        except ValidationError as e:
            raise DecodeError(operation, e) from e

    def _request(
        self,
        operation: str,
        method: str,
        url: str,
        adapter: TypeAdapter,
        not_found: Type[NotFoundError],
        json: Optional[Dict[str, Any]] = None,
    ) -> Any:
        with self._session() as client:
            r = self._send(client, method, url, not_found, json=json)
            return self._decode(adapter, r, operation)

    def _paginate(
        self,
        operation: str,
        method: str,
        url: str,
        adapter: TypeAdapter,
        not_found: Type[NotFoundError],
        body: Optional[Dict[str, Any]] = None,
    ) -> List[Any]:
        """Walk every page of a list endpoint.

        GET carries page_size/start_cursor as query parameters, POST carries
        them in the JSON body next to ``body``.
        """
        results: List[Any] = []
        cursor: Optional[str] = None
        pages = 0
        payload = dict(body or {})

        with self._session() as client:
            while True:
                if method == "GET":
                    params: Dict[str, Any] = {"page_size": self.page_size}
                    if cursor:
                        params["start_cursor"] = cursor
                    r = self._send(client, method, url, not_found, params=params)
                else:
                    payload["page_size"] = self.page_size
                    if cursor:
                        payload["start_cursor"] = cursor
                    r = self._send(client, method, url, not_found, json=payload)

                data = self._decode(adapter, r, operation)
                pages += 1
                results.extend(data.results)

                # Handle pagination
                if not data.has_more:
                    break
                cursor = data.next_cursor

        logger.debug(f"[notion] {operation}: {len(results)} results in {pages} pages")
        return results

    # Users

    def get_user(self, user_id: str) -> User:
        return self._request(
            "get_user", "GET", self._url("users", user_id), _USER, UserNotFoundError
        )

    def list_all_users(self) -> List[User]:
        return self._paginate(
            "list_all_users", "GET", self._url("users"), _USER_LIST, UserNotFoundError
        )

    def get_me(self) -> User:
        """Get the bot user the token belongs to."""
        return self._request("get_me", "GET", self._url("users", "me"), _USER, UserNotFoundError)

    # Databases

    def list_databases(self) -> List[Database]:
        return self._paginate(
            "list_databases",
            "GET",
            self._url("databases"),
            _DATABASE_LIST,
            DatabaseNotFoundError,
        )

    def get_database(self, database_id: str) -> Database:
        return self._request(
            "get_database",
            "GET",
            self._url("databases", database_id),
            _DATABASE,
            DatabaseNotFoundError,
        )

    def create_database(self, database: Database) -> Database:
        """Create a database under the page named by ``database.parent``.

        A 404 here means the parent page does not exist.
        """
        created = self._request(
            "create_database",
            "POST",
            self._url("databases"),
            _DATABASE,
            PageNotFoundError,
            json=database.to_wire(),
        )
        logger.info(f"[notion] created database {created.id}")
        return created

    def update_database(self, database: Database) -> Database:
        """Update title, description and schema of an existing database."""
        if not database.id:
            raise ValueError("database has no id")
        updated = self._request(
            "update_database",
            "PATCH",
            self._url("databases", database.id),
            _DATABASE,
            DatabaseNotFoundError,
            json=database.update_payload(),
        )
        logger.info(f"[notion] updated database {updated.id}")
        return updated

    def query_database(
        self,
        database_id: str,
        filter: Optional[Filter] = None,
        sorts: Optional[List[Sort]] = None,
    ) -> List[Page]:
        """Query a database for pages.

        Args:
            database_id: The database to query
            filter: Optional filter; sent unchanged with every page request
            sorts: Optional sort order

        Returns:
            Every matching page, in the order the API returned them
        """
        body: Dict[str, Any] = {}
        if filter is not None:
            body["filter"] = filter.to_wire()
        if sorts:
            body["sorts"] = [s.to_wire() for s in sorts]
        return self._paginate(
            "query_database",
            "POST",
            self._url("databases", database_id, "query"),
            _PAGE_LIST,
            DatabaseNotFoundError,
            body=body,
        )

    # Pages

    def get_page(self, page_id: str) -> Page:
        return self._request(
            "get_page", "GET", self._url("pages", page_id), _PAGE, PageNotFoundError
        )

    def create_page(self, page: Page) -> Page:
        """Create a page. A 404 is reported against the kind of parent."""
        not_found: Type[NotFoundError] = PageNotFoundError
        if page.parent is not None and page.parent.type == "database_id":
            not_found = DatabaseNotFoundError
        created = self._request(
            "create_page",
            "POST",
            self._url("pages"),
            _PAGE,
            not_found,
            json=page.to_wire(),
        )
        logger.info(f"[notion] created page {created.id}")
        return created

    def update_page(
        self,
        page_id: str,
        properties: Optional[Dict[str, PropertyData]] = None,
        archived: Optional[bool] = None,
    ) -> Page:
        body: Dict[str, Any] = {}
        if properties is not None:
            body["properties"] = {name: prop.to_wire() for name, prop in properties.items()}
        if archived is not None:
            body["archived"] = archived
        updated = self._request(
            "update_page",
            "PATCH",
            self._url("pages", page_id),
            _PAGE,
            PageNotFoundError,
            json=body,
        )
        logger.info(f"[notion] updated {len(properties or {})} properties for {page_id}")
        return updated

    def get_page_property(self, page_id: str, property_id: str) -> PropertyData:
        """Get one property value of a page.

        Paginated property types (title, rich_text, people, relation, rollup)
        come back one item per result; all pages are fetched and merged into
        a single value.
        """
        operation = "get_page_property"
        url = self._url("pages", page_id, "properties", property_id)
        items: List[Dict[str, Any]] = []
        summary: Dict[str, Any] = {}
        cursor: Optional[str] = None

        with self._session() as client:
            while True:
                params: Dict[str, Any] = {"page_size": self.page_size}
                if cursor:
                    params["start_cursor"] = cursor
                r = self._send(client, "GET", url, PageNotFoundError, params=params)

                raw = self._decode(_PROPERTY_ITEM, r, operation)
                if raw.get("object") != "list":
                    return self._decode(_PROPERTY, r, operation)

                data = self._decode(_PROPERTY_ITEM_LIST, r, operation)
                summary = data.property_item
                items.extend(data.results)
                if not data.has_more:
                    break
                cursor = data.next_cursor

        try:
            return _PROPERTY.validate_python(_merge_property_items(summary, items))
        except ValidationError as e:
            raise DecodeError(operation, e) from e

    # Blocks

    def get_block(self, block_id: str) -> Block:
        return self._request(
            "get_block", "GET", self._url("blocks", block_id), _BLOCK, BlockNotFoundError
        )

    def update_block(self, block: Block) -> Block:
        """Send the block's payload (and archived flag, if set) to the API."""
        if not block.id:
            raise ValueError("block has no id")
        data = block.to_wire()
        body = {k: v for k, v in data.items() if k == block.type or k in _BLOCK_UPDATABLE}
        updated = self._request(
            "update_block",
            "PATCH",
            self._url("blocks", block.id),
            _BLOCK,
            BlockNotFoundError,
            json=body,
        )
        logger.info(f"[notion] updated block {block.id}")
        return updated

    def delete_block(self, block_id: str) -> Block:
        """Archive a block. Returns the block as it is after deletion."""
        deleted = self._request(
            "delete_block", "DELETE", self._url("blocks", block_id), _BLOCK, BlockNotFoundError
        )
        logger.info(f"[notion] deleted block {block_id}")
        return deleted

    def get_blocks(self, block_id: str) -> List[Block]:
        """List the children of a block (or page)."""
        return self._paginate(
            "get_blocks",
            "GET",
            self._url("blocks", block_id, "children"),
            _BLOCK_LIST,
            BlockNotFoundError,
        )

    def append_blocks(
        self, block_id: str, children: List[Block], after: Optional[str] = None
    ) -> List[Block]:
        """Append children to a block, optionally after a given child."""
        body: Dict[str, Any] = {"children": [b.to_wire() for b in children]}
        if after:
            body["after"] = after
        data = self._request(
            "append_blocks",
            "PATCH",
            self._url("blocks", block_id, "children"),
            _BLOCK_LIST,
            BlockNotFoundError,
            json=body,
        )
        logger.info(f"[notion] appended {len(children)} blocks to {block_id}")
        return data.results

    # Search

    def search(
        self,
        query: str = "",
        filter: Optional[SearchFilter] = None,
        sort: Optional[SearchSort] = None,
    ) -> List[Union[Page, Database]]:
        """Search pages and databases shared with the integration."""
        body: Dict[str, Any] = {}
        if query:
            body["query"] = query
        if filter is not None:
            body["filter"] = filter.to_wire()
        if sort is not None:
            body["sort"] = sort.to_wire()
        return self._paginate(
            "search", "POST", self._url("search"), _SEARCH_LIST, NotFoundError, body=body
        )
