"""Export run configuration (TOML or YAML)."""

from __future__ import annotations

import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping

import yaml

from .errors import ConfigError

DEFAULT_CONFIG_PATH = Path("config.toml")

_REQUIRED = ("sql_type", "connect_string", "sql_file", "header_tmpl_file", "row_tmpl_file")


@dataclass(frozen=True)
class ExportConfig:
    """Everything needed to run one export."""

    sql_type: str
    connect_string: str
    sql_file: Path
    header_tmpl_file: Path
    row_tmpl_file: Path
    output_encoding: str = "utf-8"
    batch_size: int = 1000

    @classmethod
    def from_mapping(cls, payload: Mapping[str, object]) -> "ExportConfig":
        """Validate a decoded config document."""

        missing = [key for key in _REQUIRED if not payload.get(key)]
        if missing:
            raise ConfigError(f"Missing config keys: {', '.join(missing)}")
        for key in _REQUIRED:
            if not isinstance(payload[key], str):
                raise ConfigError(f"Config key '{key}' must be a string")

        encoding = payload.get("output_encoding", "utf-8")
        if not isinstance(encoding, str) or not encoding:
            raise ConfigError("Config key 'output_encoding' must be a non-empty string")
        try:
            "".encode(encoding)
        except LookupError as exc:
            raise ConfigError(f"Unknown output_encoding: {encoding}") from exc

        batch_size = payload.get("batch_size", 1000)
        if isinstance(batch_size, bool) or not isinstance(batch_size, int) or batch_size <= 0:
            raise ConfigError("Config key 'batch_size' must be a positive integer")

        return cls(
            sql_type=str(payload["sql_type"]),
            connect_string=str(payload["connect_string"]),
            sql_file=Path(str(payload["sql_file"])),
            header_tmpl_file=Path(str(payload["header_tmpl_file"])),
            row_tmpl_file=Path(str(payload["row_tmpl_file"])),
            output_encoding=encoding,
            batch_size=batch_size,
        )


def load_config(path: str | Path = DEFAULT_CONFIG_PATH) -> ExportConfig:
    """
    Load a config file.

    ``.yaml``/``.yml`` files are read with PyYAML, anything else as TOML.
    Relative file paths inside the config are kept as given (resolved
    against the working directory).
    """

    config_path = Path(path)
    try:
        text = config_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Open config file: {exc}") from exc

    try:
        if config_path.suffix.lower() in {".yaml", ".yml"}:
            payload = yaml.safe_load(text) or {}
        else:
            payload = tomllib.loads(text)
    except (tomllib.TOMLDecodeError, yaml.YAMLError) as exc:
        raise ConfigError(f"Parse config file {config_path}: {exc}") from exc

    if not isinstance(payload, dict):
        raise ConfigError(f"Config file {config_path} must contain a table/mapping")
    return ExportConfig.from_mapping(payload)


def read_sql(path: str | Path) -> str:
    """Read the SQL query text."""

    try:
        return Path(path).read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Open sql file: {exc}") from exc
