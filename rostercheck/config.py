from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
import os
import yaml


@dataclass(frozen=True)
class Settings:
    # Paths
    log_dir: str = "./logs"
    report_dir: str = "./reports"

    # Logging
    log_level: str = "INFO"

    # Report
    report_items_limit: int = 200

    # Optional checks
    report_duplicate_emails: bool = False
    report_invalid_roles: bool = False


@dataclass(frozen=True)
class LoadedSettings:
    settings: Settings
    sources_used: list[str]


ENV_NAMES = {
    "log_dir": "ROSTER_LOG_DIR",
    "report_dir": "ROSTER_REPORT_DIR",
    "log_level": "ROSTER_LOG_LEVEL",
    "report_items_limit": "ROSTER_REPORT_ITEMS_LIMIT",
    "report_duplicate_emails": "ROSTER_REPORT_DUPLICATES",
    "report_invalid_roles": "ROSTER_REPORT_INVALID_ROLES",
}

INT_FIELDS = ("report_items_limit",)
BOOL_FIELDS = ("report_duplicate_emails", "report_invalid_roles")


def _read_yaml_config(path: Path) -> dict:
    if not path.exists():
        return {}
    if not path.is_file():
        return {}
    with path.open("r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
        if not isinstance(data, dict):
            return {}
        return data


def _env_get(name: str) -> str | None:
    v = os.getenv(name)
    if v is None or v.strip() == "":
        return None
    return v.strip()


def parse_bool(v: str | bool | None) -> bool | None:
    if v is None or isinstance(v, bool):
        return v
    vv = str(v).strip().lower()
    if vv in ("1", "true", "yes", "y"):
        return True
    if vv in ("0", "false", "no", "n"):
        return False
    raise ValueError(f"Invalid boolean value: {v}")


def parse_int(v: str | int | None) -> int | None:
    if v is None:
        return None
    return int(v)


def _coerce(name: str, value):
    if name in INT_FIELDS:
        return parse_int(value)
    if name in BOOL_FIELDS:
        return parse_bool(value)
    return value


def loadSettings(
    config_path: str | None,
    cli_overrides: dict,
) -> LoadedSettings:
    """
    Priority: CLI > ENV > config > defaults
    """
    sources: list[str] = []
    defaults = Settings()
    merged = {name: getattr(defaults, name) for name in ENV_NAMES}

    # 1) config file
    cfg: dict = {}
    if config_path:
        cfg = _read_yaml_config(Path(config_path))
        if cfg:
            sources.append("config")
    for name in merged:
        if cfg.get(name) is not None:
            merged[name] = _coerce(name, cfg[name])

    # 2) env
    env = {name: _env_get(env_name) for name, env_name in ENV_NAMES.items()}
    if any(v is not None for v in env.values()):
        sources.append("env")
    for name, value in env.items():
        if value is not None:
            merged[name] = _coerce(name, value)

    # 3) CLI overrides (only those explicitly passed)
    if any(v is not None for v in cli_overrides.values()):
        sources.append("cli")
    for k, v in cli_overrides.items():
        if v is None:
            continue
        merged[k] = v

    if merged["report_items_limit"] < 0:
        raise ValueError("report_items_limit must be >= 0")

    settings = Settings(
        log_dir=str(merged["log_dir"]),
        report_dir=str(merged["report_dir"]),
        log_level=str(merged["log_level"]),
        report_items_limit=merged["report_items_limit"],
        report_duplicate_emails=bool(merged["report_duplicate_emails"]),
        report_invalid_roles=bool(merged["report_invalid_roles"]),
    )

    return LoadedSettings(settings=settings, sources_used=sources)
