"""
Search and category filtering over a snapshot of parts.
"""
from typing import List, Sequence, Union
from . import schemas

CategoryFilter = Union[schemas.PartCategory, str]


def matches_search(part: schemas.Part, search_term: str) -> bool:
    """True when the name or SKU contains the term, ignoring case."""
    term = search_term.lower()
    return term in part.name.lower() or term in part.sku.lower()


def matches_category(part: schemas.Part, category_filter: CategoryFilter) -> bool:
    if category_filter == schemas.ALL_CATEGORIES:
        return True
    return part.category == category_filter


def filter_parts(
    snapshot: Sequence[schemas.Part],
    search_term: str = "",
    category_filter: CategoryFilter = schemas.ALL_CATEGORIES,
) -> List[schemas.Part]:
    """
    Select the parts matching a search term and a category filter.

    The input order is preserved and the snapshot is not modified.

    Args:
        snapshot: Parts to filter, usually ``InventoryStore.query()``
        search_term: Text looked up in name and SKU; empty matches everything
        category_filter: A category, or "All" for every category

    Returns:
        List of matching parts
    """
    return [
        part for part in snapshot
        if matches_search(part, search_term) and matches_category(part, category_filter)
    ]
