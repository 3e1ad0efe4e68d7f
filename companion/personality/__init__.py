"""Personality — trait aggregation and the emotion-driven update pipeline."""

from .aggregator import (
    TRAIT_DEFAULTS,
    average,
    mood_category,
    relationship_stage,
    validate_emotion,
)
from .pipeline import PersonalityPipeline

__all__ = [
    "TRAIT_DEFAULTS",
    "average",
    "mood_category",
    "relationship_stage",
    "validate_emotion",
    "PersonalityPipeline",
]
