from __future__ import annotations

import json
from pathlib import Path

from .errors import ConfigError
from .models import Config, Theme

CONFIG_FILE = "config.json"


def default_config() -> Config:
    return Config(
        title="Diamond Documentation",
        description="Documentation generated with Diamond",
        keywords="",
        base_url="/",
        theme=Theme(primary="#3b82f6", secondary="#10b981"),
    )


def parse_theme(value: object, path: Path) -> Theme | None:
    if value is None:
        return None
    if not isinstance(value, dict):
        raise ConfigError(f"Theme in config file {path} must be an object.")
    # The user theme replaces the default wholesale.
    return Theme(primary=value.get("primary", ""), secondary=value.get("secondary", ""))


def merge_config(base: Config, data: dict, path: Path) -> Config:
    return Config(
        title=data.get("title", base.title),
        description=data.get("description", base.description),
        keywords=data.get("keywords", base.keywords),
        base_url=str(data.get("baseUrl", base.base_url)),
        theme=parse_theme(data["theme"], path) if "theme" in data else base.theme,
    )


def load_config(root: Path) -> Config:
    path = root / CONFIG_FILE
    if not path.exists():
        return default_config()
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Unable to read config file {path}: {exc}") from exc
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ConfigError(f"Invalid JSON in config file {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"JSON config must be an object: {path}")
    return merge_config(default_config(), data, path)
