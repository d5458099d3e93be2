"""Run options for build-docs.

Options come from an optional JSON config file with command-line
overrides applied on top. Example config.json:

    {
        "target_path": "src",
        "ignore_paths": ["node_modules", "_ARCHIVE"],
        "file_types": ["ts", "js"],
        "output_formats": ["json", "html"],
        "title": "My Library"
    }
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, Field, ValidationError

from .errors import ConfigError

OutputFormat = Literal["json", "md", "html"]
LogLevel = Literal["debug", "info", "warning", "error", "critical"]


class HtmlOptions(BaseModel):
    meta: list[str] = Field(
        default_factory=lambda: [
            'charset="utf-8"',
            'name="viewport" content="width=device-width, initial-scale=1"',
        ]
    )
    scripts: list[str] = Field(default_factory=list)
    styles: list[str] = Field(default_factory=list)
    body_classes: list[str] = Field(default_factory=lambda: ["build-docs"])


class BuildOptions(BaseModel):
    target_path: str = "."
    ignore_paths: list[str] = Field(
        default_factory=lambda: ["node_modules", ".git", ".dist", "dist", "__pycache__"]
    )
    file_types: list[str] = Field(
        default_factory=lambda: ["js", "jsx", "ts", "tsx", "mjs", "cjs"], min_length=1
    )
    output_path: str = "./.dist"
    output_name: str = Field(default="docs", min_length=1, max_length=128)
    output_formats: list[OutputFormat] = Field(default_factory=lambda: ["json", "html"])
    title: str = "Documentation"
    log_level: LogLevel = "info"
    strict: bool = False
    html: HtmlOptions = Field(default_factory=HtmlOptions)


def load_options(config_path: str | Path | None = None, **overrides: Any) -> BuildOptions:
    """Load options from a JSON file and apply overrides.

    Overrides that are None are ignored, so argparse defaults never mask
    values from the config file.

    Raises:
        ConfigError: If the file cannot be read or parsed, or validation fails.
    """
    data: dict[str, Any] = {}

    if config_path is not None:
        path = Path(config_path)
        try:
            data = json.loads(path.read_text())
        except OSError as e:
            raise ConfigError(f"Cannot read config file: {e}", path=str(path)) from e
        except json.JSONDecodeError as e:
            raise ConfigError(f"Invalid JSON in config file: {e}", path=str(path)) from e
        if not isinstance(data, dict):
            raise ConfigError("Config file must contain a JSON object", path=str(path))

    data.update({key: value for key, value in overrides.items() if value is not None})

    try:
        return BuildOptions.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid options: {e}", path=str(config_path) if config_path else None) from e
