"""Checker configuration: marker spelling and host settings.

Precedence (highest first): CLI overrides, an explicit config file,
.proplint.yaml in the scanned directory, [tool.proplint] in its
pyproject.toml, defaults.
"""

from __future__ import annotations

import logging
import tomllib
from pathlib import Path
from typing import Literal

import yaml
from pydantic import BaseModel, Field, ValidationError

log = logging.getLogger(__name__)

DEFAULT_MARKER = "clang::maybe_unhandled"
DEFAULT_CHECK_NAME = "readability-visible-exception-propagation"
CONFIG_FILENAME = ".proplint.yaml"


class ConfigError(ValueError):
    """Configuration file missing, unreadable or invalid."""


class CheckConfig(BaseModel):
    marker: str = Field(default=DEFAULT_MARKER, pattern=r"^.*\w.*$")   # needs an identifier
    check_name: str = DEFAULT_CHECK_NAME
    frontend: Literal["auto", "native", "clang"] = "auto"
    main_file_only: bool = True   # clang dumps: ignore declarations from headers
    patterns: list[str] = Field(
        default_factory=lambda: ["*.tree.json", "*.tree.yaml", "*.tree.yml", "*.ast.json"]
    )


def load_config(
    search_dir: Path | None = None,
    *,
    config_file: Path | None = None,
    overrides: dict | None = None,
) -> CheckConfig:
    """Resolve a CheckConfig for a scan.

    Args:
        search_dir: Directory to look for .proplint.yaml / pyproject.toml in.
        config_file: Explicit YAML config (must exist).
        overrides: Values set on the command line; None values are ignored.
    """
    data: dict = {}

    if search_dir is not None:
        data.update(_from_pyproject(search_dir / "pyproject.toml"))
        local = search_dir / CONFIG_FILENAME
        if local.is_file():
            data.update(_from_yaml(local))

    if config_file is not None:
        if not config_file.is_file():
            raise ConfigError(f"config file not found: {config_file}")
        data.update(_from_yaml(config_file))

    data.update({k: v for k, v in (overrides or {}).items() if v is not None})

    try:
        config = CheckConfig.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(f"invalid configuration: {exc}") from exc

    log.debug("Resolved config: %s", config.model_dump())
    return config


def _from_yaml(path: Path) -> dict:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except (OSError, yaml.YAMLError) as exc:
        raise ConfigError(f"cannot read {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"{path}: expected a mapping at the top level")
    log.debug("Loaded config from %s", path)
    return data


def _from_pyproject(path: Path) -> dict:
    if not path.is_file():
        return {}
    try:
        data = tomllib.loads(path.read_text(encoding="utf-8"))
    except (OSError, tomllib.TOMLDecodeError):
        log.debug("Ignoring unreadable %s", path, exc_info=True)
        return {}
    section = data.get("tool", {}).get("proplint", {})
    if section:
        log.debug("Loaded [tool.proplint] from %s", path)
    return dict(section)
