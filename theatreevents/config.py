import os
import tomllib
from pathlib import Path
from typing import Any

from theatreevents.importer.companies import MATCHING_MODES
from theatreevents.importer.normalize import TYPE_PROFILES
from theatreevents.models import ImportSettings

_DEFAULT_CONFIG_PATH = Path("config.toml")
_DEFAULT_ENV_PATH = Path(".env")


def load(path: Path = _DEFAULT_CONFIG_PATH, env_path: Path = _DEFAULT_ENV_PATH) -> dict[str, Any]:
    """Load config from TOML (if present), then overlay environment settings."""
    cfg: dict[str, Any] = {}
    if path.exists():
        with open(path, "rb") as f:
            cfg = tomllib.load(f)
    _load_env(env_path, cfg)
    return cfg


def _load_env(env_path: Path, cfg: dict) -> None:
    """Overlay THEATREEVENTS_DATABASE, _TYPE_PROFILE and _COMPANY_MATCHING; the shell beats the file."""
    _apply_env_vars(cfg)

    if not env_path.exists():
        return

    with open(env_path) as f:
        for line in f:
            line = line.strip()
            if not line or line.startswith("#") or "=" not in line:
                continue
            key, _, value = line.partition("=")
            key = key.strip()
            value = value.strip().strip('"').strip("'")
            if key not in os.environ:
                os.environ[key] = value

    _apply_env_vars(cfg)


def _apply_env_vars(cfg: dict) -> None:
    if v := os.environ.get("THEATREEVENTS_DATABASE"):
        cfg.setdefault("database", {})["path"] = v
    if v := os.environ.get("THEATREEVENTS_TYPE_PROFILE"):
        cfg.setdefault("import", {})["type_profile"] = v
    if v := os.environ.get("THEATREEVENTS_COMPANY_MATCHING"):
        cfg.setdefault("import", {})["company_matching"] = v


def get_database_path(cfg: dict) -> Path:
    return Path(cfg.get("database", {}).get("path", "data/events.db"))


def get_import_settings(cfg: dict) -> ImportSettings:
    """Build ImportSettings from the [import] section, rejecting unknown values."""
    section = cfg.get("import", {})
    settings = ImportSettings(
        type_profile=section.get("type_profile", "play"),
        company_matching=section.get("company_matching", "normalized"),
        require_companies_sheet=bool(section.get("require_companies_sheet", False)),
    )
    validate_settings(settings)
    return settings


def validate_settings(settings: ImportSettings) -> None:
    if settings.type_profile not in TYPE_PROFILES:
        raise ValueError(
            f"Unknown type_profile '{settings.type_profile}'. "
            f"Choose one of: {', '.join(sorted(TYPE_PROFILES))}"
        )
    if settings.company_matching not in MATCHING_MODES:
        raise ValueError(
            f"Unknown company_matching '{settings.company_matching}'. "
            f"Choose one of: {', '.join(MATCHING_MODES)}"
        )
