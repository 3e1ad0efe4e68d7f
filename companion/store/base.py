"""Abstract base class for trait stores."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from companion.emotion.labels import Emotion
from companion.personality.aggregator import TRAIT_DEFAULTS
from companion.store.nudge import NudgeRule

DEFAULT_CHARACTER = "kimi"


class TraitStore(ABC):
    """
    Base class for persisted per-character trait sets.

    Stores own persistence and the nudge rule. Each ``save`` call must be
    atomic; interleaving of concurrent load/nudge/save sequences for the
    same character is not coordinated here.
    """

    def __init__(self, config: dict[str, Any], rule: NudgeRule | None = None) -> None:
        """
        Initialize from a provider-specific config dict.

        The dict contains the keys of the ``store:`` section of config.yaml
        except ``provider``.
        """
        self.rule = rule or NudgeRule()
        self.default_character: str = config.get("default_character", DEFAULT_CHARACTER)

    @abstractmethod
    async def load(self, character: str) -> dict[str, Any]:
        """Return a copy of *character*'s traits (defaults when none are stored)."""
        ...

    @abstractmethod
    async def save(self, character: str, traits: dict[str, Any]) -> bool:
        """Persist the full trait set. Returns True on success."""
        ...

    @abstractmethod
    async def get_selected_character(self) -> str:
        """The character used when a caller does not name one."""
        ...

    @abstractmethod
    async def set_selected_character(self, character: str) -> None:
        ...

    def nudge(
        self, traits: dict[str, Any], emotion: Emotion | str, text: str = ""
    ) -> dict[str, Any]:
        """Apply this store's nudge rule. Returns a new dict."""
        return self.rule.apply(traits, emotion, text)

    @staticmethod
    def default_traits() -> dict[str, Any]:
        return dict(TRAIT_DEFAULTS)

    async def start(self) -> None:
        """Optional lifecycle hook — called before first use."""

    async def stop(self) -> None:
        """Optional lifecycle hook — called on shutdown."""

    async def __aenter__(self) -> TraitStore:
        await self.start()
        return self

    async def __aexit__(self, *exc) -> None:
        await self.stop()
