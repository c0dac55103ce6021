import uuid
from collections.abc import Iterable


def unique_ids(ids: Iterable[uuid.UUID | None]) -> list[uuid.UUID]:
    """Drop duplicates and ``None`` while keeping first-seen order."""
    ordered: list[uuid.UUID] = []
    seen: set[uuid.UUID] = set()
    for value in ids:
        if value is None or value in seen:
            continue
        seen.add(value)
        ordered.append(value)
    return ordered
