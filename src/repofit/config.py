"""Configuration management for repofit."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from repofit.exceptions import ConfigError

REPOFIT_DIR = ".repofit"
CONFIG_FILE = "config.json"

DEFAULT_MODEL_RATIOS: dict[str, float] = {
    "gemini-1.0-pro": 4.0,
    "gemini-1.0-pro-vision": 4.0,
    "gemini-1.5-pro": 3.75,
    "gemini-1.5-flash": 3.75,
    "gemini-2.5-pro": 3.5,
    "gemini-2.5-flash": 3.5,
    "gemini-2.5-pro-exp-03-25": 3.5,
    "default": 4.0,
}


class TokenProfile(BaseModel):
    """Characters-per-token ratios by model, plus the estimate safety margin."""

    model_config = ConfigDict(frozen=True)

    ratios: dict[str, float] = Field(default_factory=lambda: dict(DEFAULT_MODEL_RATIOS))
    safety_margin: float = Field(default=0.10, ge=0.0)

    @field_validator("ratios")
    @classmethod
    def _check_ratios(cls, value: dict[str, float]) -> dict[str, float]:
        for model_id, ratio in value.items():
            if ratio <= 0:
                raise ValueError(f"ratio for '{model_id}' must be positive, got {ratio}")
        if "default" not in value:
            value = {**value, "default": DEFAULT_MODEL_RATIOS["default"]}
        return value

    def ratio_for(self, model_id: str | None = None) -> float:
        if model_id and model_id in self.ratios:
            return self.ratios[model_id]
        return self.ratios["default"]


class TokenLimits(BaseModel):
    """Hard prompt/response limits used for usage accounting."""

    model_config = ConfigDict(frozen=True)

    max_prompt_tokens: int = 200_000
    max_response_tokens: int = 8192
    max_total_tokens: int = 208_192


class KeywordConfig(BaseModel):
    """Query keyword extraction settings."""

    model_config = ConfigDict(frozen=True)

    min_word_length: int = 3
    max_keywords: int = 15
    filter_common_terms: bool = True


class ScoringWeights(BaseModel):
    """Weights for keyword relevance scoring."""

    model_config = ConfigDict(frozen=True)

    content_weight: float = 2.0
    path_weight: float = 3.0
    proximity_bonus: bool = True
    proximity_window: int = 100  # characters
    proximity_score: float = 5.0


class PriorityRules(BaseModel):
    """Static, filename-driven priority adjustments layered on relevance."""

    model_config = ConfigDict(frozen=True)

    intro_priority: float = 100.0
    manifest_boost: float = 20.0
    manifest_suffixes: list[str] = Field(
        default_factory=lambda: [
            "package.json",
            "tsconfig.json",
            "pyproject.toml",
            "setup.cfg",
            "Cargo.toml",
            "go.mod",
        ]
    )
    manifest_fragments: list[str] = Field(
        default_factory=lambda: [
            "webpack.config",
            "README",
            "/src/index",
            "__main__.py",
        ]
    )
    include_boost: float = 10.0
    exclude_penalty: float = 10.0
    large_file_lines: int = 200
    large_file_penalty: float = 5.0


class SelectionConfig(BaseModel):
    """Greedy selection and fallback settings."""

    model_config = ConfigDict(frozen=True)

    max_sections: int = 15
    prefer_complete: bool = False
    context_size: int = 5  # lines of padding around line-window matches
    min_query_length: int = 5
    default_max_tokens: int = 200_000


class EngineConfig(BaseModel):
    """Full engine configuration."""

    model_config = ConfigDict(frozen=True)

    tokens: TokenProfile = Field(default_factory=TokenProfile)
    limits: TokenLimits = Field(default_factory=TokenLimits)
    keywords: KeywordConfig = Field(default_factory=KeywordConfig)
    scoring: ScoringWeights = Field(default_factory=ScoringWeights)
    priority: PriorityRules = Field(default_factory=PriorityRules)
    selection: SelectionConfig = Field(default_factory=SelectionConfig)


def config_path(root: Path) -> Path:
    """Location of the engine settings under a project root."""
    return root / REPOFIT_DIR / CONFIG_FILE


def find_project_root(start: Path | None = None) -> Path | None:
    """Nearest directory at or above `start` that holds a .repofit directory."""
    origin = (start or Path.cwd()).resolve()
    return next(
        (d for d in (origin, *origin.parents) if (d / REPOFIT_DIR).is_dir()),
        None,
    )


def load_config(root: Path | None) -> EngineConfig:
    """Load settings for `root`, falling back to defaults when none are stored."""
    if root is None:
        return EngineConfig()
    path = config_path(root)
    if not path.is_file():
        return EngineConfig()
    try:
        return EngineConfig.model_validate_json(path.read_text(encoding="utf-8"))
    except ValidationError as e:
        raise ConfigError(f"Invalid config file {path}: {e}") from e


def save_config(root: Path, config: EngineConfig) -> Path:
    """Store the settings that differ from the defaults. Returns the file written."""
    path = config_path(root)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(config.model_dump_json(indent=2, exclude_defaults=True), encoding="utf-8")
    return path


def get_config_value(config: EngineConfig, key: str) -> Any:
    """Look up a dotted key such as 'scoring.path_weight' or 'tokens.ratios.default'."""
    value: Any = config
    for part in key.split("."):
        if isinstance(value, BaseModel) and part in type(value).model_fields:
            value = getattr(value, part)
        elif isinstance(value, dict) and part in value:
            value = value[part]
        else:
            raise KeyError(f"Unknown config key: {key}")
    return value.model_dump() if isinstance(value, BaseModel) else value


def _with_value(model: BaseModel, parts: list[str], value: Any, key: str) -> dict[str, Any]:
    head, *rest = parts
    if head not in type(model).model_fields:
        raise KeyError(f"Unknown config key: {key}")
    data = model.model_dump()
    current = getattr(model, head)
    if not rest:
        data[head] = value
    elif isinstance(current, BaseModel):
        data[head] = _with_value(current, rest, value, key)
    elif isinstance(current, dict) and len(rest) == 1:
        # Free-form mappings (tokens.ratios) accept new entries
        data[head] = {**current, rest[0]: value}
    else:
        raise KeyError(f"Unknown config key: {key}")
    return data


def set_config_value(config: EngineConfig, key: str, value: Any) -> EngineConfig:
    """Return a validated copy of `config` with the dotted `key` set to `value`.

    Raises:
        KeyError: `key` does not name a setting.
        pydantic.ValidationError: `value` is not valid for that setting.
    """
    return EngineConfig.model_validate(_with_value(config, key.split("."), value, key))
