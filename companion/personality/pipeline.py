"""
Personality update pipeline — classify, nudge, persist, broadcast.

    text → EmotionClassifier → Emotion
         → TraitStore.load → TraitStore.nudge → TraitStore.save
         → bus "personality:updated" (+ "relationship:stageChanged")

The pipeline never raises for store problems: a missing store, a store
call that raises, or a save reporting failure is logged as a warning and
the update is dropped without publishing anything.

Concurrent updates for the same character are not serialized. Two
overlapping calls each load the same snapshot and the later save wins;
callers that need stricter ordering must await one update before
starting the next.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from companion.core.bus import (
    PERSONALITY_UPDATED,
    RELATIONSHIP_STAGE_CHANGED,
    EventBus,
)
from companion.emotion.classifier import AUTO_LANGUAGE, EmotionClassifier
from companion.emotion.labels import Emotion
from companion.personality.aggregator import relationship_stage, validate_emotion

if TYPE_CHECKING:
    from companion.store.base import TraitStore

log = logging.getLogger(__name__)


class PersonalityPipeline:
    """Orchestrates one emotion-driven trait update against a store."""

    def __init__(
        self,
        bus: EventBus,
        store: TraitStore | None = None,
        classifier: EmotionClassifier | None = None,
    ) -> None:
        self._bus = bus
        self._store = store
        self._classifier = classifier or EmotionClassifier()

    @property
    def store(self) -> TraitStore | None:
        return self._store

    @property
    def classifier(self) -> EmotionClassifier:
        return self._classifier

    async def update_from_emotion(
        self,
        emotion: Emotion | str,
        text: str = "",
        character_id: str | None = None,
    ) -> dict[str, Any] | None:
        """
        Nudge *character_id*'s traits by *emotion* and broadcast the result.

        Returns the saved trait set, or None when no update happened.
        """
        if self._store is None:
            log.warning("No trait store configured — skipping %s update", emotion)
            return None

        emotion = validate_emotion(emotion)

        try:
            character = character_id or await self._store.get_selected_character()
            current = await self._store.load(character)
            updated = self._store.nudge(current, emotion, text)
            saved = await self._store.save(character, updated)
        except Exception as e:
            log.warning("Trait store unavailable, %s update dropped: %s", emotion, e)
            return None

        if not saved:
            log.warning("Trait store rejected %s update for %s", emotion, character)
            return None

        log.info("Traits updated for %s after %s", character, emotion)
        self._bus.publish(PERSONALITY_UPDATED, dict(updated))

        previous_stage = relationship_stage(current)
        current_stage = relationship_stage(updated)
        if previous_stage != current_stage:
            log.info("Relationship with %s: %s → %s", character, previous_stage, current_stage)
            self._bus.publish(RELATIONSHIP_STAGE_CHANGED, {
                "character": character,
                "previous": previous_stage,
                "current": current_stage,
            })

        return updated

    async def process_text(
        self,
        text: str,
        language: str = AUTO_LANGUAGE,
        character_id: str | None = None,
    ) -> tuple[Emotion, dict[str, Any] | None]:
        """Classify *text* and feed the label through ``update_from_emotion``."""
        emotion = self._classifier.classify(text, language)
        traits = await self.update_from_emotion(emotion, text, character_id)
        return emotion, traits
