"""Shared fixtures for the companion test suite."""

from __future__ import annotations

from typing import Any

import pytest

from companion.core.bus import EventBus
from companion.emotion.classifier import EmotionClassifier
from companion.emotion.keywords import default_tables
from companion.personality.pipeline import PersonalityPipeline
from companion.store.providers.memory import InMemoryTraitStore


class Recorder:
    """Callable bus handler that remembers every payload it receives."""

    def __init__(self) -> None:
        self.calls: list[Any] = []

    def __call__(self, payload: Any) -> None:
        self.calls.append(payload)


@pytest.fixture
def bus():
    return EventBus()


@pytest.fixture
def recorder():
    return Recorder()


@pytest.fixture
def classifier():
    return EmotionClassifier(default_tables())


@pytest.fixture
def memory_store():
    """Factory: ``memory_store({"char1": {...}})`` builds a seeded store."""

    def _make(traits: dict[str, dict[str, Any]] | None = None) -> InMemoryTraitStore:
        return InMemoryTraitStore({"traits": traits or {}})

    return _make


@pytest.fixture
def pipeline(bus, memory_store, classifier):
    return PersonalityPipeline(bus, memory_store(), classifier)
