"""Reference checks shared by the write use cases."""

from typing import Any, Protocol

from src.core.exceptions import UnknownReferenceError


class _Lookup(Protocol):
    async def get(self, entity_id: int) -> Any: ...


async def require_reference(store: _Lookup, entity: str, entity_id: int | None) -> Any:
    """Return the referenced record, or raise if the id is unknown. ``None`` passes through."""
    if entity_id is None:
        return None
    found = await store.get(entity_id)
    if found is None:
        raise UnknownReferenceError(entity, entity_id)
    return found


async def require_products(store: _Lookup, product_ids: list[int]) -> None:
    for product_id in dict.fromkeys(product_ids):
        await require_reference(store, "product", product_id)
