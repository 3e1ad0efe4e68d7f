"""In-process trait store, used by tests and the simulation harness."""

from __future__ import annotations

import copy
import logging
from typing import Any

from companion.store.base import TraitStore
from companion.store.nudge import NudgeRule

log = logging.getLogger(__name__)


class InMemoryTraitStore(TraitStore):
    """
    Dict-backed store. Optional seed data comes from
    ``config["traits"]`` as ``{character: {trait: value}}``.
    """

    def __init__(self, config: dict[str, Any] | None = None, rule: NudgeRule | None = None) -> None:
        config = config or {}
        super().__init__(config, rule)
        self._traits: dict[str, dict[str, Any]] = copy.deepcopy(config.get("traits", {}))
        self._selected = self.default_character

    async def load(self, character: str) -> dict[str, Any]:
        stored = self._traits.get(character)
        if stored is None:
            return self.default_traits()
        return dict(stored)

    async def save(self, character: str, traits: dict[str, Any]) -> bool:
        self._traits[character] = dict(traits)
        log.debug("Traits saved for %s", character)
        return True

    async def get_selected_character(self) -> str:
        return self._selected

    async def set_selected_character(self, character: str) -> None:
        self._selected = character
