"""Read/append/update/delete use cases over one stored collection."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from newsdesk.repositories.json_storage import CollectionStore


@dataclass(frozen=True)
class ResourceSpec:
    """Routing and wording for one collection."""

    key: str
    path: str
    filename: str
    label: str
    noun: str
    plural: str
    methods: tuple[str, ...]
    id_field: Optional[str] = None
    create_verb: str = "added"
    create_action: str = "add"

    def created_message(self) -> str:
        return f"{self.label} {self.create_verb} successfully"

    def updated_message(self) -> str:
        return f"{self.label} updated successfully"

    def deleted_message(self) -> str:
        return f"{self.label} deleted successfully"

    def failure_message(self, action: str) -> str:
        if action == "fetch":
            return f"Failed to fetch {self.plural}"
        return f"Failed to {action} {self.noun}"


RESOURCES: tuple[ResourceSpec, ...] = (
    ResourceSpec(
        key="articles",
        path="/articles",
        filename="articles.json",
        label="Article",
        noun="article",
        plural="articles",
        methods=("GET", "POST"),
        create_verb="saved",
        create_action="save",
    ),
    ResourceSpec(
        key="rss-feeds",
        path="/rss-feeds",
        filename="rss-feeds.json",
        label="RSS feed",
        noun="RSS feed",
        plural="RSS feeds",
        methods=("GET", "POST", "DELETE"),
    ),
    ResourceSpec(
        key="services",
        path="/services",
        filename="services.json",
        label="Service",
        noun="service",
        plural="services",
        methods=("GET", "POST", "PUT", "DELETE"),
    ),
    ResourceSpec(
        key="special-offers",
        path="/special-offers",
        filename="special-offers.json",
        label="Special offer",
        noun="special offer",
        plural="special offers",
        methods=("GET", "POST", "PUT", "DELETE"),
    ),
    ResourceSpec(
        key="feature-toggles",
        path="/feature-toggles",
        filename="feature-toggles.json",
        label="Feature toggle",
        noun="feature toggle",
        plural="feature toggles",
        methods=("GET", "PUT"),
        id_field="id",
    ),
)


def parse_position(identifier: Any) -> Optional[int]:
    """Parse a positional identifier; None when it cannot address any index."""
    try:
        position = int(str(identifier).strip(), 10)
    except (TypeError, ValueError):
        return None
    return position if position >= 0 else None


class CollectionService:
    """
    Generic CRUD over a store.

    With id_field=None a record is addressed by its current array index;
    otherwise by string equality on that field. Updates and deletes that
    match nothing leave the collection as it was and still succeed.
    """

    def __init__(self, store: CollectionStore, id_field: Optional[str] = None) -> None:
        self.store = store
        self.id_field = id_field

    def _matches(self, index: int, record: Any, identifier: str) -> bool:
        if self.id_field:
            return isinstance(record, dict) and record.get(self.id_field) == identifier
        return index == parse_position(identifier)

    def list_records(self) -> list:
        return self.store.load()

    def add(self, record: Any) -> None:
        records = self.store.load()
        records.append(record)
        self.store.save(records)

    def update(self, identifier: str, changes: dict) -> bool:
        """Shallow-merge changes onto the matching record. Returns whether one matched."""
        records = self.store.load()
        matched = False
        updated = []
        for index, record in enumerate(records):
            if self._matches(index, record, identifier):
                matched = True
                # non-object records are replaced by the changes
                base = record if isinstance(record, dict) else {}
                updated.append({**base, **changes})
            else:
                updated.append(record)
        self.store.save(updated)
        return matched

    def delete(self, identifier: str) -> bool:
        records = self.store.load()
        kept = [record for index, record in enumerate(records) if not self._matches(index, record, identifier)]
        self.store.save(kept)
        return len(kept) != len(records)
