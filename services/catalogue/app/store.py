"""
In-memory inventory store for the Catalogue service.

The store is the single owner of the part records. Every mutation goes
through its methods so the record invariants hold:

- the collection is kept sorted newest ``date_added`` first (stable on ties)
- ``stock_history`` gets a new entry only when the stock level changes
- ``id``, ``date_added`` and ``sales_log`` survive an update untouched
- stock never drops below zero

Readers only ever receive deep copies of the records.
"""
import logging
import threading
import uuid
from datetime import datetime
from typing import Callable, Iterable, List, Optional, Tuple

from . import schemas, validators
from .config import ensure_aware, utc_now
from .errors import PartNotFoundError, PartValidationError

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]
DeleteListener = Callable[[str], None]

EDITABLE_FIELDS = set(schemas.PartBase.model_fields)


def _new_id() -> str:
    return uuid.uuid4().hex


def _check(result: validators.ValidationResult) -> None:
    is_valid, field, message = result
    if not is_valid:
        raise PartValidationError(field, message)


class InventoryStore:
    """
    Owns the canonical, ordered collection of parts.

    Args:
        clock: Callable returning the current aware datetime
        id_factory: Callable returning a fresh unique part id
    """

    def __init__(self, clock: Clock = utc_now, id_factory: Callable[[], str] = _new_id):
        self._parts: List[schemas.Part] = []
        self._clock = clock
        self._id_factory = id_factory
        self._delete_listeners: List[DeleteListener] = []
        # Requests may be served from several worker threads
        self._lock = threading.RLock()
        self.version = 0

    def now(self) -> datetime:
        return self._clock()

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def query(self) -> Tuple[schemas.Part, ...]:
        """Return a snapshot of every part in display order."""
        with self._lock:
            return tuple(part.model_copy(deep=True) for part in self._parts)

    def get(self, part_id: str) -> Optional[schemas.Part]:
        with self._lock:
            index = self._index_of(part_id)
            if index is None:
                return None
            return self._parts[index].model_copy(deep=True)

    def stock_history(self, part_id: str) -> List[schemas.HistoryEntry]:
        """
        Stock history of a part, newest entry first.

        The stored order is left as written; only the returned copy is sorted.

        Raises:
            PartNotFoundError: if no part has this id
        """
        part = self.get(part_id)
        if part is None:
            raise PartNotFoundError(part_id)
        return sorted(part.stock_history, key=lambda entry: ensure_aware(entry.timestamp), reverse=True)

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def create(self, draft: schemas.PartBase) -> schemas.Part:
        """
        Create a part from a draft.

        Assigns a fresh id, stamps ``date_added`` with the current time and
        seeds the stock history with the opening stock level.

        Raises:
            PartValidationError: if the draft breaks a field rule
        """
        _check(validators.validate_part(draft))
        with self._lock:
            part = self._seed(draft, self._id_factory(), self._clock())
            self._insert(part)
            logger.info(f"Created part {part.id} (SKU '{part.sku}', stock {part.stock})")
            return part.model_copy(deep=True)

    def update(self, part: schemas.Part) -> schemas.Part:
        """
        Save an edited part.

        Unknown ids are created from the payload as given. For an existing
        part all editable fields are replaced; a stock change appends one
        history entry stamped now. ``id``, ``date_added`` and ``sales_log``
        always keep their stored values.

        Raises:
            PartValidationError: if the payload breaks a field rule
        """
        _check(validators.validate_part(part))
        with self._lock:
            index = self._index_of(part.id)
            if index is None:
                created = self._seed(part, part.id, part.date_added)
                self._insert(created)
                logger.info(f"Part {part.id} not found on update, created it")
                return created.model_copy(deep=True)

            existing = self._parts[index]
            history = list(existing.stock_history)
            if part.stock != existing.stock:
                history.append(schemas.HistoryEntry(timestamp=self._clock(), quantity=part.stock))

            changes = part.model_dump(include=EDITABLE_FIELDS)
            changes["stock_history"] = history
            updated = existing.model_copy(update=changes, deep=True)
            if updated.model_dump() == existing.model_dump():
                return updated

            self._parts[index] = updated
            self._sort()
            self.version += 1
            logger.info(f"Updated part {part.id}")
            return updated.model_copy(deep=True)

    def delete(self, part_id: str) -> None:
        """Remove a part. Unknown ids are ignored."""
        with self._lock:
            index = self._index_of(part_id)
            if index is None:
                return
            del self._parts[index]
            self.version += 1
            listeners = list(self._delete_listeners)
        logger.info(f"Deleted part {part_id}")
        for listener in listeners:
            listener(part_id)

    def adjust_stock(self, part_id: str, delta: int) -> schemas.Part:
        """
        Add (positive delta) or remove (negative delta) stock.

        Removals are clamped so stock never goes below zero.

        Raises:
            PartNotFoundError: if no part has this id
        """
        with self._lock:
            index = self._require(part_id)
            part = self._set_stock(index, self._parts[index].stock + delta)
            return part.model_copy(deep=True)

    def record_sale(self, part_id: str, quantity: int, timestamp: Optional[datetime] = None) -> schemas.Part:
        """
        Log a dispatch of ``quantity`` units and take them out of stock.

        Args:
            part_id: Part that was dispatched
            quantity: Units dispatched, must be positive
            timestamp: When the dispatch happened (defaults to now)

        Raises:
            PartValidationError: if quantity is not positive
            PartNotFoundError: if no part has this id
        """
        _check(validators.validate_sale_quantity(quantity))
        with self._lock:
            index = self._require(part_id)
            sale = schemas.HistoryEntry(timestamp=timestamp or self._clock(), quantity=quantity)
            self._parts[index] = self._parts[index].model_copy(
                update={"sales_log": self._parts[index].sales_log + [sale]}, deep=True
            )
            self.version += 1
            part = self._set_stock(index, self._parts[index].stock - quantity)
            logger.info(f"Recorded sale of {quantity} x part {part_id}")
            return part.model_copy(deep=True)

    def load(self, parts: Iterable[schemas.Part]) -> None:
        """
        Bulk-load existing records verbatim, keeping their ids and logs.

        Records without a stock history get one seeded from ``date_added``.
        A record whose id is already held replaces the stored one.
        """
        with self._lock:
            for part in parts:
                record = part.model_copy(deep=True)
                if not record.stock_history:
                    record.stock_history = [
                        schemas.HistoryEntry(timestamp=record.date_added, quantity=record.stock)
                    ]
                index = self._index_of(record.id)
                if index is None:
                    self._parts.append(record)
                else:
                    logger.warning(f"Duplicate part id {record.id} on load, replacing stored record")
                    self._parts[index] = record
            self._sort()
            self.version += 1

    def add_delete_listener(self, listener: DeleteListener) -> None:
        """Register a callback invoked with the id of every deleted part."""
        with self._lock:
            self._delete_listeners.append(listener)

    def remove_delete_listener(self, listener: DeleteListener) -> None:
        with self._lock:
            if listener in self._delete_listeners:
                self._delete_listeners.remove(listener)

    # ------------------------------------------------------------------
    # Internals (callers hold the lock)
    # ------------------------------------------------------------------

    def _seed(self, source: schemas.PartBase, part_id: str, date_added: datetime) -> schemas.Part:
        fields = source.model_dump(include=EDITABLE_FIELDS)
        return schemas.Part(
            **fields,
            id=part_id,
            date_added=date_added,
            stock_history=[schemas.HistoryEntry(timestamp=date_added, quantity=source.stock)],
            sales_log=[],
        )

    def _insert(self, part: schemas.Part) -> None:
        self._parts.insert(0, part)
        self._sort()
        self.version += 1

    def _sort(self) -> None:
        # list.sort is stable, also with reverse=True
        self._parts.sort(key=lambda part: ensure_aware(part.date_added), reverse=True)

    def _index_of(self, part_id: str) -> Optional[int]:
        for index, part in enumerate(self._parts):
            if part.id == part_id:
                return index
        return None

    def _require(self, part_id: str) -> int:
        index = self._index_of(part_id)
        if index is None:
            raise PartNotFoundError(part_id)
        return index

    def _set_stock(self, index: int, stock: int) -> schemas.Part:
        part = self._parts[index]
        stock = max(0, stock)
        if stock == part.stock:
            return part
        updated = part.model_copy(
            update={
                "stock": stock,
                "stock_history": part.stock_history
                + [schemas.HistoryEntry(timestamp=self._clock(), quantity=stock)],
            },
            deep=True,
        )
        self._parts[index] = updated
        self.version += 1
        logger.info(f"Stock of part {part.id} changed {part.stock} -> {stock}")
        return updated
