"""dotgraph CLI configuration management.

Loads configuration from TOML files with environment variable overrides
(``DOTGRAPH_`` prefix).  Uses :mod:`tomllib` on Python 3.11+.
"""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field, ValidationError

from dotgraph.cli.errors import CLIError, ConfigError
from dotgraph.parser.api import DEFAULT_MAX_INPUT_BYTES, ParserConfig
from dotgraph.parser.grammar import DEFAULT_MAX_NESTING, MAX_NESTING_LIMIT

# ---------------------------------------------------------------------------
# Default paths
# ---------------------------------------------------------------------------

DEFAULT_CONFIG_DIR = ".dotgraph"
DEFAULT_CONFIG_FILE = "config.toml"

# ---------------------------------------------------------------------------
# Configuration model
# ---------------------------------------------------------------------------


class DotGraphConfig(BaseModel):
    """Application configuration with sensible defaults.

    All fields can be overridden via environment variables with the
    ``DOTGRAPH_`` prefix.  For example ``DOTGRAPH_MAX_NESTING=16``.
    """

    log_level: str = "INFO"
    log_file: Optional[Path] = None
    max_input_bytes: int = Field(default=DEFAULT_MAX_INPUT_BYTES, gt=0)
    max_nesting: int = Field(default=DEFAULT_MAX_NESTING, gt=0, le=MAX_NESTING_LIMIT)
    indent: int = Field(default=4, ge=0, le=16)

    model_config = {"extra": "ignore"}

    def parser_config(self) -> ParserConfig:
        """Parser limits derived from this configuration."""
        return ParserConfig(
            max_input_bytes=self.max_input_bytes,
            max_nesting=self.max_nesting,
        )


# ---------------------------------------------------------------------------
# Loader helpers
# ---------------------------------------------------------------------------


def _apply_env_overrides(data: dict) -> dict:
    """Apply DOTGRAPH_ environment variable overrides to *data*."""
    prefix = "DOTGRAPH_"
    field_names = set(DotGraphConfig.model_fields.keys())
    for key, value in os.environ.items():
        if key.startswith(prefix):
            field = key[len(prefix):].lower()
            if field in field_names:
                data[field] = value
    return data


def load_config(config_path: Path | None = None, project_dir: Path | None = None) -> DotGraphConfig:
    """Load configuration from a TOML file with env-var overrides.

    Parameters
    ----------
    config_path:
        Explicit path to a TOML file.  When *None*, looks for
        ``<project_dir>/.dotgraph/config.toml``.
    project_dir:
        Directory searched for the default config.  Defaults to
        :func:`Path.cwd`.

    Returns
    -------
    DotGraphConfig
        Parsed and validated configuration.

    Raises
    ------
    ConfigError
        If an explicit *config_path* is missing, the TOML is malformed, or a
        value fails validation.
    """
    project = project_dir or Path.cwd()
    path = config_path or (project / DEFAULT_CONFIG_DIR / DEFAULT_CONFIG_FILE)

    if config_path is not None and not path.exists():
        raise ConfigError(f"Config file not found: {path}")

    data: dict = {}
    if path.exists():
        try:
            with open(path, "rb") as fh:
                data = tomllib.load(fh)
        except tomllib.TOMLDecodeError as exc:
            raise ConfigError(f"Invalid TOML in {path}: {exc}") from exc

    # Flatten nested TOML sections if present
    flat: dict = {}
    for k, v in data.items():
        if isinstance(v, dict):
            flat.update(v)
        else:
            flat[k] = v

    flat = _apply_env_overrides(flat)
    try:
        return DotGraphConfig(**flat)
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration: {exc}") from exc


def default_config_toml() -> str:
    """Return default configuration as a TOML string."""
    return f"""\
# dotgraph configuration

[general]
log_level = "INFO"

[parser]
max_input_bytes = {DEFAULT_MAX_INPUT_BYTES}
max_nesting = {DEFAULT_MAX_NESTING}

[render]
indent = 4
"""


def write_default_config(project_dir: Path, *, force: bool = False) -> Path:
    """Write ``<project_dir>/.dotgraph/config.toml`` with default values.

    Raises
    ------
    CLIError
        If *project_dir* is not a directory, or the file already exists and
        *force* is not set.
    """
    if not project_dir.is_dir():
        raise CLIError(f"Not a directory: {project_dir}")
    config_path = project_dir / DEFAULT_CONFIG_DIR / DEFAULT_CONFIG_FILE
    if config_path.exists() and not force:
        raise CLIError(
            f"Configuration already exists: {config_path}\n"
            "Use --force to overwrite."
        )
    config_path.parent.mkdir(parents=True, exist_ok=True)
    config_path.write_text(default_config_toml(), encoding="utf-8")
    return config_path
