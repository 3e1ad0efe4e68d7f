"""
YAML configuration loader for the companion core.

The ``store`` section has:
  - A ``provider`` key selecting the trait store implementation
  - Everything else flows into ``provider_config`` as a plain dict

The remaining sections map one-to-one onto the dataclasses below.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

CONFIG_ENV = "COMPANION_CONFIG"
DEFAULT_CONFIG_NAME = "config.yaml"


# ── Section configs ──────────────────────────────────────────────────────

@dataclass
class BusConfig:
    """Event bus diagnostics."""
    diagnostics: bool = False
    diagnostics_capacity: int = 300


@dataclass
class ClassifierConfig:
    """Emotion classifier configuration."""
    keywords_file: str = ""               # empty = packaged keywords.yaml
    language: str = "auto"


@dataclass
class PersonaConfig:
    default_character: str = "kimi"


@dataclass
class NudgeConfig:
    """Scaling applied to emotion-driven trait changes."""
    global_gain: float = 1.2
    global_loss: float = 0.8
    emotion_gain: dict[str, float] = field(default_factory=lambda: {
        "positive": 1.1,
        "negative": 0.9,
        "romantic": 1.3,
        "laughing": 1.15,
        "dancing": 1.05,
        "shy": 0.95,
        "confident": 1.1,
        "flirtatious": 1.2,
        "surprise": 1.05,
        "kiss": 1.35,
        "goodbye": 0.9,
    })
    trait_gain: dict[str, float] = field(default_factory=lambda: {
        "affection": 1.15,
        "romance": 1.2,
        "empathy": 1.1,
        "playfulness": 1.15,
        "humor": 1.12,
        "intelligence": 1.08,
    })
    trait_loss: dict[str, float] = field(default_factory=lambda: {
        "affection": 0.9,
        "romance": 0.9,
    })


@dataclass
class StoreConfig:
    """Trait store provider + provider configuration."""
    provider: str = "sqlite"
    provider_config: dict[str, Any] = field(
        default_factory=lambda: {"db_path": "data/companion.db"}
    )


@dataclass
class AppConfig:
    bus: BusConfig = field(default_factory=BusConfig)
    classifier: ClassifierConfig = field(default_factory=ClassifierConfig)
    persona: PersonaConfig = field(default_factory=PersonaConfig)
    nudge: NudgeConfig = field(default_factory=NudgeConfig)
    store: StoreConfig = field(default_factory=StoreConfig)


# ── Helpers ──────────────────────────────────────────────────────────────

_STORE_ENGINE_KEYS = {"provider"}


def _resolve_paths(d: dict[str, Any], base: Path) -> None:
    """Resolve values whose keys look like paths against *base*."""
    for key, val in list(d.items()):
        if isinstance(val, str) and key.endswith("_path") and val != ":memory:":
            d[key] = str(base / val)
        elif isinstance(val, dict):
            _resolve_paths(val, base)


def _split_section(
    raw: dict[str, Any], engine_keys: set[str]
) -> tuple[dict[str, Any], dict[str, Any]]:
    """Split a YAML section into engine kwargs and provider config."""
    engine = {}
    provider = {}
    for k, v in raw.items():
        if k in engine_keys:
            engine[k] = v
        else:
            provider[k] = v
    return engine, provider


def default_config_path() -> Path:
    """``$COMPANION_CONFIG`` when set, else ``config.yaml`` in the working directory."""
    override = os.environ.get(CONFIG_ENV)
    if override:
        return Path(override)
    return Path.cwd() / DEFAULT_CONFIG_NAME


def load_config(path: Path | str | None = None) -> AppConfig:
    """
    Load configuration from YAML file, falling back to defaults.

    Relative ``*_path`` values and ``keywords_file`` resolve against the
    directory holding the config file.
    """
    config_path = Path(path) if path else default_config_path()
    base = config_path.resolve().parent
    cfg = AppConfig()

    if config_path.exists():
        with open(config_path, "r", encoding="utf-8") as f:
            raw = yaml.safe_load(f) or {}

        if "bus" in raw:
            cfg.bus = BusConfig(**raw["bus"])
        if "classifier" in raw:
            cfg.classifier = ClassifierConfig(**raw["classifier"])
        if "persona" in raw:
            cfg.persona = PersonaConfig(**raw["persona"])
        if "nudge" in raw:
            # Partial maps override the defaults key by key
            defaults = NudgeConfig()
            section = raw["nudge"]
            cfg.nudge = NudgeConfig(
                global_gain=section.get("global_gain", defaults.global_gain),
                global_loss=section.get("global_loss", defaults.global_loss),
                emotion_gain={**defaults.emotion_gain, **section.get("emotion_gain", {})},
                trait_gain={**defaults.trait_gain, **section.get("trait_gain", {})},
                trait_loss={**defaults.trait_loss, **section.get("trait_loss", {})},
            )
        if "store" in raw:
            engine, provider = _split_section(raw["store"], _STORE_ENGINE_KEYS)
            cfg.store = StoreConfig(**engine, provider_config=provider)

    # Resolve paths
    cfg.store.provider_config.setdefault(
        "default_character", cfg.persona.default_character
    )
    _resolve_paths(cfg.store.provider_config, base)
    if cfg.classifier.keywords_file:
        cfg.classifier.keywords_file = str(base / cfg.classifier.keywords_file)

    return cfg
