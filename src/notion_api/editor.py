"""Batched property edits on a single page."""

from contextlib import contextmanager
from typing import TYPE_CHECKING, Dict, Generator, Optional

from loguru import logger

from .page import Page
from .properties import PropertyData

if TYPE_CHECKING:
    from .client import NotionClient


def _comparable(prop: PropertyData) -> dict:
    data = prop.to_wire()
    data.pop("id", None)
    return data


class PageEditor:
    """Queue property updates for a page and send them in one request."""

    def __init__(self, client: "NotionClient", page_id: str) -> None:
        """Initialize an editor.

        Args:
            client: The NotionClient instance to use for API calls
            page_id: The ID of the page
        """
        self.client = client
        self.id = page_id
        self._page: Optional[Page] = None
        self._pending_updates: Dict[str, PropertyData] = {}

    def refresh(self) -> None:
        """Refresh the page from Notion."""
        self._page = self.client.get_page(self.id)

    @property
    def page(self) -> Page:
        """Get the page, fetching it if not already loaded."""
        if self._page is None:
            self.refresh()
        return self._page

    @property
    def pending(self) -> Dict[str, PropertyData]:
        return dict(self._pending_updates)

    def queue_property_update(self, name: str, value: PropertyData) -> None:
        """Queue a property update without making an API call.

        Args:
            name: The name of the property
            value: The new value; its type must match the page's property
        """
        prop = self.page.get_property(name)
        if prop is None:
            raise RuntimeError(f"Property {name!r} not found on page")
        if prop.type != value.type:
            raise RuntimeError(f"Property {name!r} is type {prop.type!r}; expected {value.type!r}")

        if _comparable(prop) == _comparable(value):
            logger.debug(f"[notion] {name!r} already set for {self.id}, skipping")
            return

        self._pending_updates[name] = value
        logger.debug(f"[notion] queued update for {name!r} on {self.id}")

    def update_property(self, name: str, value: PropertyData) -> None:
        """Update a page property immediately."""
        self.queue_property_update(name, value)
        self.commit_updates()

    def commit_updates(self) -> None:
        """Apply all pending property updates in a single API call."""
        if not self._pending_updates:
            return

        self._page = self.client.update_page(self.id, properties=self._pending_updates)
        logger.info(f"[notion] committed {len(self._pending_updates)} queued updates for {self.id}")
        self._pending_updates.clear()

    @contextmanager
    def batch_update(self) -> Generator[None, None, None]:
        """Context manager for batching property updates.

        Example:
            with editor.batch_update():
                editor.queue_property_update("Link", URLPropertyData(url="http://..."))
                editor.queue_property_update("Notes", RichTextPropertyData(rich_text=[...]))
                # Updates are committed at the end of the with block
        """
        try:
            yield
            if self._pending_updates:
                self.commit_updates()
        except Exception:
            self._pending_updates.clear()
            raise
