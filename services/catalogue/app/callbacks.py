"""
View state and user-action callbacks for the catalogue front end.

``CatalogueSession`` keeps what the screen shows (selected part, part being
edited, search and category filter, inventory or catalogue mode) and maps
the UI callbacks onto inventory store operations.
"""
import logging
from typing import List, Literal, Optional

from . import filters, schemas
from .errors import DeletionNotConfirmedError
from .store import InventoryStore

logger = logging.getLogger(__name__)

AppView = Literal["inventory", "catalogue"]


class CatalogueSession:
    """
    Presentation state bound to one inventory store.

    Args:
        store: Store every action is applied to
    """

    def __init__(self, store: InventoryStore):
        self.store = store
        self.selected_part: Optional[schemas.Part] = None
        self.editing_part: Optional[schemas.Part] = None
        self.search_term = ""
        self.category_filter: filters.CategoryFilter = schemas.ALL_CATEGORIES
        self.app_view: AppView = "inventory"
        store.add_delete_listener(self._on_part_deleted)

    def close(self) -> None:
        """Detach from the store."""
        self.store.remove_delete_listener(self._on_part_deleted)

    def on_save(self, part: schemas.Part) -> schemas.Part:
        """
        Save the part from the edit form and close the form.

        The selected part is refreshed when it is the one saved.
        """
        saved = self.store.update(part)
        if self.selected_part is not None and self.selected_part.id == saved.id:
            self.selected_part = saved
        self.editing_part = None
        return saved

    def on_create(self, draft: schemas.PartDraft) -> schemas.Part:
        created = self.store.create(draft)
        self.editing_part = None
        return created

    def on_delete(self, part_id: str, confirmed: bool = False) -> None:
        """
        Delete a part once the user has confirmed.

        Raises:
            DeletionNotConfirmedError: if ``confirmed`` is False
        """
        if not confirmed:
            raise DeletionNotConfirmedError(
                "Are you sure you want to delete this part? This action cannot be undone."
            )
        self.store.delete(part_id)

    def on_view(self, part: schemas.Part) -> None:
        self.selected_part = part

    def on_edit(self, part: Optional[schemas.Part] = None) -> None:
        """Open the edit form for ``part``, or an empty form when None."""
        self.editing_part = part

    def back_to_list(self) -> None:
        self.selected_part = None

    def toggle_view(self) -> AppView:
        self.app_view = "catalogue" if self.app_view == "inventory" else "inventory"
        return self.app_view

    def visible_parts(self) -> List[schemas.Part]:
        """Parts shown in the list for the current search and category filter."""
        return filters.filter_parts(self.store.query(), self.search_term, self.category_filter)

    def _on_part_deleted(self, part_id: str) -> None:
        if self.selected_part is not None and self.selected_part.id == part_id:
            logger.info(f"Selected part {part_id} was deleted, clearing selection")
            self.selected_part = None
        if self.editing_part is not None and self.editing_part.id == part_id:
            self.editing_part = None
