"""FastAPI application emulating the users and databases endpoints."""

from typing import TYPE_CHECKING, Any, Dict, List, Optional

from fastapi import APIRouter, Body, Depends, FastAPI, Header, Query, Request
from fastapi.responses import JSONResponse
from loguru import logger
from pydantic import ValidationError

from notion_api.client import NotionClient
from notion_api.database import Database
from notion_api.types import ErrorObject

from .util import new_id

if TYPE_CHECKING:
    from .mock import Mock


class MockAPIError(Exception):
    """Rendered as the API's JSON error object."""

    def __init__(self, status: int, code: str, message: str) -> None:
        self.status = status
        self.code = code
        self.message = message
        super().__init__(f"{code}: {message}")


def _not_found(kind: str, object_id: str) -> MockAPIError:
    message = f"Could not find {kind} with ID: {object_id}."
    if kind == "database":
        message += " Make sure the relevant pages and databases are shared with your integration."
    return MockAPIError(404, "object_not_found", message)


def _paginate(items: List[Any], page_size: int, start_cursor: Optional[str]) -> Dict[str, Any]:
    """Slice ``items``; the cursor is the id of the first item of the next page."""
    start = 0
    if start_cursor:
        ids = [item.id for item in items]
        if start_cursor not in ids:
            raise MockAPIError(400, "validation_error", f"start_cursor {start_cursor} is invalid.")
        start = ids.index(start_cursor)

    end = start + page_size
    has_more = end < len(items)
    return {
        "object": "list",
        "results": [item.to_wire() for item in items[start:end]],
        "has_more": has_more,
        "next_cursor": items[end].id if has_more else None,
    }


def create_app(mock: "Mock") -> FastAPI:
    app = FastAPI(title="Notion API mock")

    @app.exception_handler(MockAPIError)
    def _error(request: Request, exc: MockAPIError) -> JSONResponse:
        logger.debug(f"[notiontest] {request.method} {request.url.path} -> {exc.status} {exc.code}")
        body = ErrorObject(object="object", status=exc.status, code=exc.code, message=exc.message)
        return JSONResponse(status_code=exc.status, content=body.to_wire())

    def authorize(
        authorization: Optional[str] = Header(None),
        notion_version: Optional[str] = Header(None),
    ):
        token = ""
        if authorization and "Bearer " in authorization:
            token = authorization.split("Bearer ", 1)[1]
        bot = mock.tokens.get(token)
        if bot is None:
            raise MockAPIError(401, "unauthorized", "API token is invalid.")
        if notion_version != NotionClient.API_VERSION:
            raise MockAPIError(
                400,
                "missing_version",
                "Notion-Version header failed validation: Notion-Version header should be "
                f"defined, instead was `{notion_version or 'undefined'}`.",
            )
        return bot

    router = APIRouter(prefix="/v1", dependencies=[Depends(authorize)])

    @router.get("/users")
    def list_users(page_size: int = Query(100), start_cursor: Optional[str] = None) -> dict:
        return _paginate(mock.users, page_size, start_cursor)

    @router.get("/users/me")
    def get_me(bot=Depends(authorize)) -> dict:
        return bot.to_wire()

    @router.get("/users/{user_id}")
    def get_user(user_id: str) -> dict:
        for user in mock.users:
            if user.id == user_id:
                return user.to_wire()
        raise _not_found("user", user_id)

    @router.post("/databases")
    def create_database(body: Dict[str, Any] = Body(...)) -> dict:
        db = _parse_database(body)
        db.id = new_id()
        mock.database(db)
        logger.info(f"[notiontest] created database {db.id}")
        return db.to_wire()

    @router.get("/databases/{database_id}")
    def get_database(database_id: str) -> dict:
        db = mock.get_database(database_id)
        if db is None:
            raise _not_found("database", database_id)
        return db.to_wire()

    @router.patch("/databases/{database_id}")
    def update_database(database_id: str, body: Dict[str, Any] = Body(...)) -> dict:
        current = mock.get_database(database_id)
        if current is None:
            raise _not_found("database", database_id)
        updated = _parse_database(body)
        updated.id = current.id
        updated.object = "database"
        mock.replace_database(updated)
        return updated.to_wire()

    app.include_router(router)
    return app


def _parse_database(body: Dict[str, Any]) -> Database:
    try:
        db = Database.from_wire(body)
    except ValidationError as e:
        raise MockAPIError(400, "validation_error", str(e)) from e
    db.object = "database"
    return db
