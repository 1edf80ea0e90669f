# mindbalance/config.py
"""
Tool configuration file loading.

The file is JSON (``.mindbalance`` or ``mindbalance.json``), validated once
into a typed ``AppConfig``. ``ConfigProvider`` owns the current snapshot and
its load/reload lifecycle; the scorer only ever sees the ``ScorerDefaults``
copied out of it.
"""
from __future__ import annotations

import json
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic.alias_generators import to_camel

from .engine.argumentation import ArgumentWeights
from .engine.scorer import ScorerDefaults
from .logging_config import log_event, logger, set_debug
from .settings import get_settings

CONFIG_FILENAMES = (".mindbalance", "mindbalance.json")

RuleName = Literal["brier", "log", "quadratic", "spherical"]


class ConfigError(RuntimeError):
    pass


class _Section(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True, allow_inf_nan=False)


class ServerSection(_Section):
    name: str = "mcp-mind-argumentation"
    version: str = "1.0.0"
    description: str = "MCP Mind Balance & Argumentation Service"


class ScoringSection(_Section):
    rules: List[RuleName] = Field(default_factory=lambda: ["brier", "log"])
    abstention_score: Optional[float] = 0.0


class MindBalanceSection(_Section):
    abstain_threshold: float = Field(0.70, ge=0.0, le=1.0)
    tan_clamp: float = Field(3.0, gt=0.0)
    normalize: bool = True
    scoring: ScoringSection = Field(default_factory=ScoringSection)


class ConfidenceSection(_Section):
    premise_weight: float = Field(0.5, ge=0.0)
    objection_weight: float = Field(0.3, ge=0.0)
    risk_penalty: float = Field(0.3, ge=0.0)


class ArgumentationSection(_Section):
    confidence: ConfidenceSection = Field(default_factory=ConfidenceSection)


class ToolsSection(_Section):
    debug: bool = False


class AppConfig(_Section):
    version: Optional[str] = None
    environment: Optional[str] = None
    server: ServerSection = Field(default_factory=ServerSection)
    mind_balance: MindBalanceSection = Field(default_factory=MindBalanceSection)
    argumentation: ArgumentationSection = Field(default_factory=ArgumentationSection)
    tools: ToolsSection = Field(default_factory=ToolsSection)


def deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Recursive dict merge; lists and scalars in override replace base."""
    merged = dict(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def find_config_file(start: Path | None = None) -> Optional[Path]:
    current = (start or Path.cwd()).resolve()
    for directory in (current, *current.parents):
        for name in CONFIG_FILENAMES:
            candidate = directory / name
            if candidate.is_file():
                return candidate
    return None


def parse_config(raw: Dict[str, Any], environment: str) -> AppConfig:
    if not isinstance(raw, dict):
        raise ConfigError("Configuration root must be a JSON object")

    overrides = (raw.get("environments") or {}).get(environment) or {}
    if not isinstance(overrides, dict):
        raise ConfigError(f"environments.{environment} must be an object")

    merged = deep_merge({k: v for k, v in raw.items() if k != "environments"}, overrides)
    merged.setdefault("environment", environment)
    try:
        return AppConfig.model_validate(merged)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration: {e}") from e


def load_config(path: Path | str | None = None, environment: str = "production") -> tuple[AppConfig, Optional[Path]]:
    config_path = Path(path) if path else find_config_file()
    if config_path is None or not config_path.is_file():
        logger.warning(f"Configuration file not found: {config_path}; using defaults")
        return AppConfig(environment=environment), None

    try:
        raw = json.loads(config_path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        raise ConfigError(f"Cannot read {config_path}: {e}") from e

    return parse_config(raw, environment), config_path


class ConfigProvider:
    """Holds the current config snapshot. Readers never mutate it."""

    def __init__(self, path: Path | str | None = None, environment: str = "production"):
        self._path = path
        self._environment = environment
        self._config = AppConfig(environment=environment)
        self._source: Optional[Path] = None

    def load(self) -> AppConfig:
        config, source = load_config(self._path, self._environment)
        self._config, self._source = config, source
        set_debug(config.tools.debug)
        log_event("CONFIG_LOADED", "configuration loaded", {
            "source": str(source) if source else None,
            "environment": self._environment,
        })
        return config

    def reload(self) -> AppConfig:
        return self.load()

    @property
    def config(self) -> AppConfig:
        return self._config

    @property
    def source(self) -> Optional[Path]:
        return self._source

    @property
    def environment(self) -> str:
        return self._environment

    def scorer_defaults(self) -> ScorerDefaults:
        mb = self._config.mind_balance
        abstention = mb.scoring.abstention_score
        return ScorerDefaults(
            abstain_threshold=mb.abstain_threshold,
            tan_clamp=mb.tan_clamp,
            normalize=mb.normalize,
            scoring_rules=tuple(mb.scoring.rules),
            abstention_score=0.0 if abstention is None else abstention,
        )

    def argument_weights(self) -> ArgumentWeights:
        c = self._config.argumentation.confidence
        return ArgumentWeights(
            premise_weight=c.premise_weight,
            objection_weight=c.objection_weight,
            risk_penalty=c.risk_penalty,
        )


@lru_cache
def get_config_provider() -> ConfigProvider:
    settings = get_settings()
    provider = ConfigProvider(settings.CONFIG_PATH, settings.ENV)
    provider.load()
    return provider
