"""TOML config loading and profiles."""

from __future__ import annotations

import logging
import tomllib
from pathlib import Path
from typing import Any

from memeoracle.ledger.engine import DEFAULT_OPTIONS, LedgerConfig

# Default config search path (project root or cwd)
_CONFIG_DIR = Path(__file__).resolve().parent.parent.parent.parent / "config"
_CWD_CONFIG = Path.cwd() / "config"


def _load_toml(path: Path) -> dict[str, Any]:
    with open(path, "rb") as f:
        return tomllib.load(f)


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge override into base. Override values take precedence."""
    result = dict(base)
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def _find_config_dir(config_dir: Path | None = None) -> Path:
    if config_dir is not None:
        return config_dir
    if _CWD_CONFIG.exists():
        return _CWD_CONFIG
    return _CONFIG_DIR


def load_config(profile: str | None = None, config_dir: Path | None = None) -> dict[str, Any]:
    """Load merged config from default.toml and optional profile overlay."""
    config_dir = _find_config_dir(config_dir)
    default_path = config_dir / "default.toml"
    if not default_path.exists():
        return {}
    base = _load_toml(default_path)
    if profile:
        profile_path = config_dir / f"{profile}.toml"
        if profile_path.exists():
            overlay = _load_toml(profile_path)
            base = _deep_merge(base, overlay)
    return base


def get_settings(profile: str | None = None, config_dir: Path | None = None) -> Settings:
    """Return Settings instance from merged config."""
    raw = load_config(profile, config_dir)
    return Settings.from_dict(raw)


class Settings:
    """Application settings from TOML config."""

    def __init__(
        self,
        *,
        ledger: dict[str, Any] | None = None,
        scorecard: dict[str, Any] | None = None,
        commentary: dict[str, Any] | None = None,
        api: dict[str, Any] | None = None,
        logging: dict[str, Any] | None = None,
    ):
        self.ledger = ledger or {}
        self.scorecard = scorecard or {}
        self.commentary = commentary or {}
        self.api = api or {}
        self.logging = logging or {}

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> Settings:
        return cls(
            ledger=raw.get("ledger"),
            scorecard=raw.get("scorecard"),
            commentary=raw.get("commentary"),
            api=raw.get("api"),
            logging=raw.get("logging"),
        )

    # Convenience accessors with defaults
    @property
    def default_expires_in_ms(self) -> int:
        return int(self.ledger.get("default_expires_in_ms", 86_400_000))

    @property
    def default_options(self) -> list[str]:
        return list(self.ledger.get("default_options") or DEFAULT_OPTIONS)

    @property
    def default_confidence(self) -> float:
        return float(self.ledger.get("default_confidence", 50))

    @property
    def payout_decimals(self) -> int:
        return int(self.ledger.get("payout_decimals", 2))

    def ledger_config(self) -> LedgerConfig:
        return LedgerConfig(
            default_expires_in_ms=self.default_expires_in_ms,
            default_options=self.default_options,
            default_confidence=self.default_confidence,
            payout_decimals=self.payout_decimals,
        )

    @property
    def profit_factor(self) -> float:
        return float(self.scorecard.get("profit_factor", 0.9))

    @property
    def commentary_enabled(self) -> bool:
        return bool(self.commentary.get("enabled", True))

    @property
    def commentary_api_url(self) -> str:
        return self.commentary.get("api_url", "https://api.anthropic.com/v1/messages")

    @property
    def commentary_model(self) -> str:
        return self.commentary.get("model", "claude-sonnet-4-20250514")

    @property
    def commentary_max_tokens(self) -> int:
        return int(self.commentary.get("max_tokens", 500))

    @property
    def commentary_timeout_sec(self) -> float:
        return float(self.commentary.get("timeout_sec", 30.0))

    @property
    def commentary_api_key_env(self) -> str:
        return self.commentary.get("api_key_env", "ANTHROPIC_API_KEY")

    @property
    def api_host(self) -> str:
        return self.api.get("host", "127.0.0.1")

    @property
    def api_port(self) -> int:
        return int(self.api.get("port", 3021))

    @property
    def seed_demo(self) -> bool:
        return bool(self.api.get("seed_demo", True))

    @property
    def logging_level(self) -> str:
        return self.logging.get("level", "INFO").upper()

    @property
    def logging_format(self) -> str:
        return self.logging.get("format", "console")

    @property
    def logging_level_num(self) -> int:
        return getattr(logging, self.logging_level, logging.INFO)


def configure_logging(settings: Settings) -> None:
    """Configure structlog with settings. Call once at application entry."""
    import structlog

    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]
    if settings.logging_format == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(settings.logging_level_num),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )
