"""Trait store registry — lazy-loaded to avoid importing unused dependencies."""

from __future__ import annotations

import importlib
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from companion.store.base import TraitStore

# Maps provider name → (module_path, class_name).
# Add new providers here.
_REGISTRY: dict[str, tuple[str, str]] = {
    "memory": (
        "companion.store.providers.memory",
        "InMemoryTraitStore",
    ),
    "sqlite": (
        "companion.store.providers.sqlite",
        "SQLiteTraitStore",
    ),
}


def get_store_provider(name: str) -> type[TraitStore]:
    """Return the TraitStore class for *name*, importing lazily."""
    if name not in _REGISTRY:
        available = ", ".join(sorted(_REGISTRY))
        raise ValueError(
            f"Unknown trait store provider {name!r}. Available: {available}"
        )
    module_path, class_name = _REGISTRY[name]
    module = importlib.import_module(module_path)
    return getattr(module, class_name)
