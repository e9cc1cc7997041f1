from __future__ import annotations

import datetime as dt
from pathlib import Path

from .errors import SiteIOError


def normalize_base_url(base: str) -> str:
    base = str(base)
    return base if base.endswith("/") else f"{base}/"


def join_url(base: str, path: str) -> str:
    return normalize_base_url(base) + path.lstrip("/")


def json_default(value: object) -> str:
    if isinstance(value, (dt.date, dt.datetime, dt.time)):
        return value.isoformat()
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def check_output_dir(output_dir: Path, project_root: Path) -> None:
    output_resolved = output_dir.resolve()
    root_resolved = project_root.resolve()
    if output_resolved == root_resolved:
        raise SiteIOError("Refusing to replace the project root.")
    if not output_resolved.is_relative_to(root_resolved):
        raise SiteIOError("Refusing to replace an output directory outside the project root.")
