"""Configuration loading and validation."""

from __future__ import annotations

import logging
import math
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from .classifiers import ComplementNaiveClassifier, NaiveClassifier
from .classifiers.base import DEFAULT_NORM_LENGTH, DEFAULT_SMOOTHING_ALPHA, ClassifierSettings
from .correction import DEFAULT_BACKGROUND_STRENGTH, ProbabilityCorrection, correction_from_name
from .errors import ConfigError
from .trainingset import TrainingSet

LOGGER = logging.getLogger(__name__)

CONFIG_ENV_VAR = "BAYESFILTER_CONFIG"
DEFAULT_CONFIG_PATH = Path("~/.config/bayesfilter/config.yaml")
DEFAULT_LOG_LEVEL = "info"
DEFAULT_STOP_WORDS = 20

# "messages" derives priors from per-class message counts, "none" keeps them as set.
PRIOR_POLICIES = ("messages", "automatic", "equal", "none")

CLASSIFIERS: dict[str, type[ClassifierSettings]] = {
    "naive": NaiveClassifier,
    "complement": ComplementNaiveClassifier,
}


@dataclass(frozen=True)
class LoggingConfig:
    """Logging-related configuration."""

    level: str = DEFAULT_LOG_LEVEL
    file: Path | None = None


@dataclass(frozen=True)
class CorrectionConfig:
    """Probability correction applied after Bayes normalisation."""

    kind: str = "none"
    background_strength: float = DEFAULT_BACKGROUND_STRENGTH

    def build(self) -> ProbabilityCorrection:
        if self.kind == "beta":
            return correction_from_name("beta", background_strength=self.background_strength)
        return correction_from_name(self.kind)


@dataclass(frozen=True)
class Config:
    """Fully parsed configuration."""

    classifier: str = "naive"
    smoothing_alpha: float = DEFAULT_SMOOTHING_ALPHA
    norm_length: float = DEFAULT_NORM_LENGTH
    occurrence_threshold: int = 0
    percentage_threshold: float = 0.0
    correction: CorrectionConfig = field(default_factory=CorrectionConfig)
    class_probabilities: str = "messages"
    stop_words: int = DEFAULT_STOP_WORDS
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def load_config(path: Path | str | None = None) -> Config:
    """Load and validate configuration from YAML.

    An explicit path (argument or environment variable) must exist; a missing
    default file yields the built-in defaults.
    """

    config_path, explicit = _resolve_config_path(path)
    if not config_path.exists():
        if explicit:
            raise ConfigError(f"Config file not found: {config_path}")
        LOGGER.debug("No config file at %s; using defaults", config_path)
        return Config()

    with config_path.open("r", encoding="utf-8") as handle:
        raw = yaml.safe_load(handle) or {}

    if not isinstance(raw, dict):
        raise ConfigError("Configuration root must be a mapping.")

    return _parse_config(raw)


def build_classifier(config: Config, training_set: TrainingSet) -> ClassifierSettings:
    """Apply thresholds to ``training_set`` and return the configured classifier."""

    training_set.occurrence_threshold = config.occurrence_threshold
    training_set.percentage_threshold = config.percentage_threshold
    factory = CLASSIFIERS[config.classifier]
    return factory(
        training_set,
        smoothing_alpha=config.smoothing_alpha,
        norm_length=config.norm_length,
        probability_correction=config.correction.build(),
    )


def _resolve_config_path(explicit: Path | str | None) -> tuple[Path, bool]:
    if explicit:
        return Path(explicit).expanduser(), True
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        return Path(env_path).expanduser(), True
    return DEFAULT_CONFIG_PATH.expanduser(), False


def _parse_config(raw: dict[str, Any]) -> Config:
    classifier = str(raw.get("classifier", "naive")).strip().lower()
    if classifier not in CLASSIFIERS:
        known = ", ".join(sorted(CLASSIFIERS))
        raise ConfigError(f"classifier must be one of: {known}.")
    return Config(
        classifier=classifier,
        smoothing_alpha=_parse_number(raw, "smoothing_alpha", DEFAULT_SMOOTHING_ALPHA),
        norm_length=_parse_number(raw, "norm_length", DEFAULT_NORM_LENGTH),
        occurrence_threshold=_parse_count(raw, "occurrence_threshold", 0),
        percentage_threshold=_parse_number(raw, "percentage_threshold", 0.0),
        correction=_parse_correction(raw.get("correction")),
        class_probabilities=_parse_class_probabilities(raw.get("class_probabilities")),
        stop_words=_parse_count(raw, "stop_words", DEFAULT_STOP_WORDS),
        logging=_parse_logging(raw.get("logging")),
    )


def _parse_number(raw: dict[str, Any], key: str, default: float) -> float:
    value = raw.get(key, default)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigError(f"{key} must be a number.")
    number = float(value)
    if not math.isfinite(number) or number < 0:
        raise ConfigError(f"{key} must be a finite number greater than or equal to zero.")
    return number


def _parse_count(raw: dict[str, Any], key: str, default: int) -> int:
    value = raw.get(key, default)
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigError(f"{key} must be an integer.")
    if value < 0:
        raise ConfigError(f"{key} must be greater than or equal to zero.")
    return value


def _parse_correction(value: Any) -> CorrectionConfig:
    if value is None:
        return CorrectionConfig()
    if isinstance(value, str):
        value = {"kind": value}
    if not isinstance(value, dict):
        raise ConfigError("correction must be a mapping or a correction name.")
    kind = str(value.get("kind", "none")).strip().lower()
    if kind not in ("none", "beta"):
        raise ConfigError("correction.kind must be 'none' or 'beta'.")
    strength = value.get("background_strength", DEFAULT_BACKGROUND_STRENGTH)
    if isinstance(strength, bool) or not isinstance(strength, (int, float)):
        raise ConfigError("correction.background_strength must be a number.")
    if not math.isfinite(strength) or strength <= 0:
        raise ConfigError("correction.background_strength must be a finite number above zero.")
    return CorrectionConfig(kind=kind, background_strength=float(strength))


def _parse_class_probabilities(value: Any) -> str:
    if value is None:
        return "messages"
    normalized = str(value).strip().lower()
    if normalized not in PRIOR_POLICIES:
        known = ", ".join(PRIOR_POLICIES)
        raise ConfigError(f"class_probabilities must be one of: {known}.")
    return normalized


def _parse_logging(value: Any) -> LoggingConfig:
    if value is None:
        return LoggingConfig()
    if not isinstance(value, dict):
        raise ConfigError("logging must be a mapping.")
    level = str(value.get("level", DEFAULT_LOG_LEVEL)).lower()
    file_value = value.get("file")
    log_file = Path(str(file_value)).expanduser() if file_value else None
    return LoggingConfig(level=level, file=log_file)


__all__ = [
    "CLASSIFIERS",
    "Config",
    "ConfigError",
    "CorrectionConfig",
    "LoggingConfig",
    "PRIOR_POLICIES",
    "build_classifier",
    "load_config",
]
