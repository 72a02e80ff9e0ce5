"""Matcher configuration, vocabularies and YAML loading."""

import logging
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any

import yaml

from pricecompare.errors import ConfigError

logger = logging.getLogger(__name__)

VALID_STRATEGIES = frozenset({"threshold", "semantic-first"})
VALID_LEXICAL_MODES = frozenset({"jaccard", "coverage"})
VALID_BRAND_POLICIES = frozenset({"recognized", "any"})
VALID_SEMANTIC_BACKENDS = frozenset({"none", "api", "local"})

# Iteration order is the tie-break order when a title names several brands.
DEFAULT_BRANDS: tuple[str, ...] = (
    # Tech
    "apple", "samsung", "google", "oneplus", "xiaomi", "redmi", "oppo", "vivo",
    "realme", "motorola", "nokia", "sony", "lg", "asus", "poco", "boat",
    "jbl", "sennheiser", "bose", "hp", "dell", "lenovo", "acer", "msi",
    "noise", "fire-boltt", "amazfit", "garmin", "fitbit", "spigen", "anker",
    "logitech", "razer", "corsair", "whirlpool", "panasonic", "toshiba",
    "intel", "amd", "nvidia", "gopro", "dji", "canon", "nikon",
    # Cosmetics & general
    "l'oreal", "maybelline", "revlon", "nyx", "lakme", "mac", "sugar",
    "himalaya", "nivea", "dove", "olay", "ponds", "adidas", "nike", "puma",
)  # fmt: skip

# Sub-brands folded into their parent before comparison
DEFAULT_BRAND_ALIASES: dict[str, str] = {
    "redmi": "xiaomi",
    "poco": "xiaomi",
}

# Model-defining words; a difference here means a different product
DEFAULT_SPEC_WORDS: tuple[str, ...] = (
    "pro", "plus", "ultra", "max", "lite", "fe", "fan edition", "se", "go", "mini",
)  # fmt: skip

DEFAULT_STOP_WORDS = frozenset({"the", "new", "a", "an", "for", "with", "of"})

# Words that carry no identity for token overlap scoring
DEFAULT_FLUFF_WORDS = frozenset(
    {
        "combo", "edition", "gen", "generation", "pro", "max", "ultra", "lite", "plus",
        "new", "latest", "with", "and", "for", "the", "of", "by", "pack", "set",
        "black", "white", "blue", "red", "green", "grey", "gray", "silver", "gold",
        "pink", "purple", "yellow", "orange", "titanium", "graphite", "midnight",
        "starlight", "colour", "color",
    }
)  # fmt: skip


@dataclass(frozen=True)
class Vocabulary:
    """Fixed word lists used by the attribute extractors and lexical scorer."""

    brands: tuple[str, ...] = DEFAULT_BRANDS
    spec_words: tuple[str, ...] = DEFAULT_SPEC_WORDS
    stop_words: frozenset[str] = DEFAULT_STOP_WORDS
    fluff_words: frozenset[str] = DEFAULT_FLUFF_WORDS
    brand_aliases: dict[str, str] = field(default_factory=lambda: dict(DEFAULT_BRAND_ALIASES), hash=False)

    @classmethod
    def default(cls) -> "Vocabulary":
        """Return the built-in vocabulary."""
        return cls()

    @classmethod
    def from_dict(cls, d: dict[str, Any] | None) -> "Vocabulary":
        """Build a vocabulary from a config section.

        Lists given under ``brands``/``spec_words``/``stop_words``/``fluff_words``
        replace the defaults; ``extra_brands`` and ``extra_spec_words`` append.

        Raises:
            ConfigError: If a list entry is not a string.
        """
        d = d or {}
        brands = list(_string_list(d, "brands", DEFAULT_BRANDS))
        brands += [b for b in _string_list(d, "extra_brands", ()) if b not in brands]
        spec_words = list(_string_list(d, "spec_words", DEFAULT_SPEC_WORDS))
        spec_words += [s for s in _string_list(d, "extra_spec_words", ()) if s not in spec_words]

        aliases = d.get("brand_aliases", DEFAULT_BRAND_ALIASES)
        if not isinstance(aliases, dict):
            raise ConfigError(f"brand_aliases must be a mapping (got {type(aliases).__name__})")

        return cls(
            brands=tuple(brands),
            spec_words=tuple(spec_words),
            stop_words=frozenset(_string_list(d, "stop_words", DEFAULT_STOP_WORDS)),
            fluff_words=frozenset(_string_list(d, "fluff_words", DEFAULT_FLUFF_WORDS)),
            brand_aliases={str(k).lower(): str(v).lower() for k, v in aliases.items()},
        )


def _string_list(d: dict[str, Any], key: str, default: Any) -> tuple[str, ...]:
    """Read a list of lowercase strings from a config mapping."""
    values = d.get(key, default)
    if not isinstance(values, (list, tuple, set, frozenset)):
        raise ConfigError(f"{key} must be a list (got {type(values).__name__})")
    for value in values:
        if not isinstance(value, str):
            raise ConfigError(f"{key} entries must be strings (got {value!r})")
    return tuple(v.lower().strip() for v in values if v.strip())


@dataclass
class MatcherConfig:
    """Thresholds and policies for the match orchestrator."""

    semantic_threshold: float = 0.78
    hard_threshold: float = 0.8  # Lexical score that accepts without a semantic check
    reject_threshold: float = 0.3  # Lexical score below which the pair is rejected
    strategy: str = "threshold"  # threshold, semantic-first
    lexical_mode: str = "jaccard"  # jaccard, coverage
    brand_policy: str = "recognized"  # recognized, any
    query_threshold: float = 0.5  # Coverage needed to accept a listing for a raw query

    semantic_backend: str = "none"  # none, api, local
    semantic_model: str = "sentence-transformers/all-MiniLM-L6-v2"
    api_url: str = "https://api-inference.huggingface.co/models/sentence-transformers/all-MiniLM-L6-v2"
    api_token_env: str = "HF_API_TOKEN"
    api_timeout: float = 15.0

    def __post_init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        """Check value ranges and enum fields.

        Raises:
            ConfigError: If any field is out of range.
        """
        for name in ("semantic_threshold", "hard_threshold", "reject_threshold", "query_threshold"):
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                raise ConfigError(f"{name} must be between 0 and 1 (got {value})")
        if self.reject_threshold > self.hard_threshold:
            raise ConfigError(
                f"reject_threshold ({self.reject_threshold}) must not exceed hard_threshold ({self.hard_threshold})"
            )
        if self.api_timeout <= 0:
            raise ConfigError(f"api_timeout must be > 0 (got {self.api_timeout})")

        choices = {
            "strategy": VALID_STRATEGIES,
            "lexical_mode": VALID_LEXICAL_MODES,
            "brand_policy": VALID_BRAND_POLICIES,
            "semantic_backend": VALID_SEMANTIC_BACKENDS,
        }
        for name, valid in choices.items():
            value = getattr(self, name)
            if value not in valid:
                raise ConfigError(f"invalid {name}: {value!r}. Valid: {sorted(valid)}")

    @classmethod
    def from_dict(cls, d: dict[str, Any] | None) -> "MatcherConfig":
        """Build from a config section, ignoring unknown keys.

        Raises:
            ConfigError: If a value has the wrong type or range.
        """
        d = d or {}
        known = {f.name: f for f in fields(cls)}
        kwargs: dict[str, Any] = {}
        for key, value in d.items():
            if key not in known:
                logger.debug(f"Ignoring unknown matcher option: {key}")
                continue
            default = known[key].default
            try:
                kwargs[key] = float(value) if isinstance(default, float) else str(value)
            except (TypeError, ValueError) as e:
                raise ConfigError(f"invalid value for {key}: {value!r}") from e
        return cls(**kwargs)


@dataclass
class AppConfig:
    """Top-level configuration loaded from config.yaml."""

    matcher: MatcherConfig = field(default_factory=MatcherConfig)
    vocabulary: Vocabulary = field(default_factory=Vocabulary)
    source_a: str = "Source A"
    source_b: str = "Source B"
    output_dir: Path = Path("output")

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> "AppConfig":
        """Build from a parsed YAML document."""
        sources = d.get("sources") or {}
        output = d.get("output") or {}
        return cls(
            matcher=MatcherConfig.from_dict(d.get("matcher")),
            vocabulary=Vocabulary.from_dict(d.get("vocabulary")),
            source_a=str(sources.get("a", "Source A")),
            source_b=str(sources.get("b", "Source B")),
            output_dir=Path(output.get("base_dir", "output")),
        )


def load_config(config_path: Path) -> AppConfig:
    """Load configuration from a YAML file.

    Args:
        config_path: Path to config.yaml.

    Returns:
        Parsed configuration. Missing sections use defaults.

    Raises:
        FileNotFoundError: If config file doesn't exist.
        ConfigError: If the document is not a mapping or holds invalid values.
    """
    config_path = Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path) as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {config_path}: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {config_path} must contain a mapping")

    return AppConfig.from_dict(data)
