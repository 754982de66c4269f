"""Declarative lookup over the cost catalog.

A ``CatalogQuery`` lists the filters a cost-engine branch needs; every
branch resolves entries through the same ``matches`` rule instead of its own
ad-hoc scan.
"""

from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple

from engine.types import Category, CostCatalogItem, Unit


@dataclass(frozen=True)
class CatalogQuery:
    """Filters for a catalog lookup. ``None`` means "don't filter on this".

    ``equipment_type`` and ``well_type`` are soft filters: an entry that
    carries no equipment/well type matches any well. Well types match by
    substring, so an entry typed "NOC BTC" applies to a well typed
    "NOC BTC (Pad 3)".
    """
    category: Optional[Category] = None
    unit: Optional[Unit] = None
    item: Optional[str] = None
    item_contains: Optional[str] = None
    subcategory: Optional[str] = None
    equipment_type: Optional[str] = None
    well_type: Optional[str] = None

    def matches(self, entry: CostCatalogItem) -> bool:
        if self.category is not None and entry.category is not self.category:
            return False
        if self.unit is not None and entry.unit is not self.unit:
            return False
        if self.item is not None and entry.item != self.item:
            return False
        if self.item_contains is not None and self.item_contains not in entry.item:
            return False
        if self.subcategory is not None and entry.subcategory != self.subcategory:
            return False
        if (self.equipment_type and entry.equipment_type
                and entry.equipment_type != self.equipment_type):
            return False
        if self.well_type and entry.well_type and entry.well_type not in self.well_type:
            return False
        return True


class CostCatalog:
    """Read-only view over the catalog entries, in catalog order."""

    def __init__(self, items: Iterable[CostCatalogItem]):
        self._items: Tuple[CostCatalogItem, ...] = tuple(items)

    def __iter__(self):
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def find(self, query: CatalogQuery) -> Optional[CostCatalogItem]:
        """First entry matching ``query``, or None."""
        return next((entry for entry in self._items if query.matches(entry)), None)

    def find_first(self, *queries: CatalogQuery) -> Optional[CostCatalogItem]:
        """Try each query in turn; first hit wins."""
        for query in queries:
            found = self.find(query)
            if found is not None:
                return found
        return None

    def select(self, query: CatalogQuery) -> List[CostCatalogItem]:
        return [entry for entry in self._items if query.matches(entry)]

    def by_category(self, category: Category) -> List[CostCatalogItem]:
        return self.select(CatalogQuery(category=category))
