"""Run configuration for entity documentation generation.

Paths are resolved against an explicit project root instead of the process
working directory. A config file (YAML or JSON) may override any default;
command-line flags are applied on top with ``DocsConfig.with_overrides``.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any

import yaml

logger = logging.getLogger(__name__)

DEFAULT_ENTITIES_DIR = "src/entities"
DEFAULT_FILE_PATTERN = "**/*.ts"
DEFAULT_OUTPUT_DIR = "docs"
DEFAULT_HTML_FILENAME = "index.html"
DEFAULT_MARKDOWN_FILENAME = "typeorm_entities_documentation.md"
DEFAULT_JSON_FILENAME = "entities.json"
DEFAULT_TITLE = "TypeORM Entities Documentation"


class ConfigValidationError(RuntimeError):
    """Raised when a docs config file cannot be loaded or validated."""


@dataclass(frozen=True)
class DocsConfig:
    """Explicit configuration of one documentation run."""

    project_root: str = "."
    entities_dir: str = DEFAULT_ENTITIES_DIR
    file_pattern: str = DEFAULT_FILE_PATTERN
    output_dir: str = DEFAULT_OUTPUT_DIR
    html_filename: str = DEFAULT_HTML_FILENAME
    markdown_filename: str = DEFAULT_MARKDOWN_FILENAME
    json_filename: str = DEFAULT_JSON_FILENAME
    title: str = DEFAULT_TITLE
    write_markdown: bool = False
    write_json: bool = False

    def _resolve(self, path: str) -> str:
        raw = Path(path)
        if raw.is_absolute():
            return str(raw)
        return os.path.abspath(os.path.join(self.project_root, raw))

    @property
    def entities_path(self) -> str:
        return self._resolve(self.entities_dir)

    @property
    def output_path(self) -> str:
        return self._resolve(self.output_dir)

    @property
    def html_path(self) -> str:
        return os.path.join(self.output_path, self.html_filename)

    @property
    def markdown_path(self) -> str:
        return os.path.join(self.output_path, self.markdown_filename)

    @property
    def json_path(self) -> str:
        return os.path.join(self.output_path, self.json_filename)

    def with_overrides(self, **overrides: Any) -> "DocsConfig":
        """Return a copy with the non-None overrides applied."""
        changes = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **changes) if changes else self


_STRING_KEYS = {
    "project_root",
    "entities_dir",
    "file_pattern",
    "output_dir",
    "html_filename",
    "markdown_filename",
    "json_filename",
    "title",
}
_BOOL_KEYS = {"write_markdown", "write_json"}


def _load_config_payload(path: str) -> dict[str, Any]:
    config_path = Path(path)
    if not config_path.is_file():
        raise ConfigValidationError(f"Config file not found: {config_path}")

    text = config_path.read_text(encoding="utf-8")
    try:
        if config_path.suffix.lower() == ".json":
            payload = json.loads(text)
        else:
            payload = yaml.safe_load(text)
    except (json.JSONDecodeError, yaml.YAMLError) as exc:
        raise ConfigValidationError(f"Failed to parse config file {config_path}: {exc}") from exc

    if payload is None:
        logger.warning("Config file is empty: %s; using defaults", config_path)
        return {}
    if not isinstance(payload, dict):
        raise ConfigValidationError(
            f"Config file {config_path} must contain a mapping, got {type(payload).__name__}"
        )
    return payload


def parse_docs_config(payload: dict[str, Any], base_dir: str = ".") -> DocsConfig:
    """Validate a config mapping into a ``DocsConfig``.

    A relative ``project_root`` is resolved against ``base_dir``.
    """
    known = {f.name for f in fields(DocsConfig)}
    unknown = sorted(set(payload) - known)
    if unknown:
        raise ConfigValidationError("Unknown config keys: " + ", ".join(unknown))

    values: dict[str, Any] = {}
    for key, raw in payload.items():
        if key in _STRING_KEYS:
            value = str(raw).strip() if raw is not None else ""
            if not value:
                raise ConfigValidationError(f"{key} must be a non-empty string")
            values[key] = value
        elif key in _BOOL_KEYS:
            if not isinstance(raw, bool):
                raise ConfigValidationError(f"{key} must be a boolean")
            values[key] = raw

    root = values.get("project_root", ".")
    values["project_root"] = os.path.abspath(os.path.join(base_dir, root))
    return DocsConfig(**values)


def load_docs_config(path: str) -> DocsConfig:
    """Load and validate a docs config from a YAML/JSON file.

    A relative ``project_root`` is resolved against the config file's directory.
    """
    payload = _load_config_payload(path)
    base_dir = os.path.dirname(os.path.abspath(path))
    config = parse_docs_config(payload, base_dir=base_dir)
    logger.debug("Loaded docs config from %s: %s", path, config)
    return config
