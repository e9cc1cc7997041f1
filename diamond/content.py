from __future__ import annotations

import datetime as dt
import os
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path, PurePosixPath

import yaml

from .errors import FrontMatterError, RenderError, SiteIOError
from .markup import markdown_to_html
from .models import PostWithContent

SOURCE_SUFFIX = ".md"
POSTS_SEGMENT = "posts"
OUTPUT_DIR = "dist"
RESERVED_README = "readme.md"
DEPENDENCY_DIRS = {"node_modules", "venv", "site-packages", "__pypackages__", "__pycache__"}
FRONT_MATTER_OPEN = "---"
FRONT_MATTER_CLOSE = {"---", "..."}
MAX_WORKERS = 32


def split_front_matter(text: str) -> tuple[dict, str]:
    clean_text = text.lstrip("\ufeff")
    lines = clean_text.splitlines()
    if not lines or lines[0].strip() != FRONT_MATTER_OPEN:
        return {}, clean_text

    end = None
    for i in range(1, len(lines)):
        if lines[i].strip() in FRONT_MATTER_CLOSE:
            end = i
            break
    if end is None:
        return {}, clean_text

    try:
        meta = yaml.safe_load("\n".join(lines[1:end]))
    except yaml.YAMLError as exc:
        raise FrontMatterError(f"Malformed front matter: {exc}") from exc
    if meta is None:
        meta = {}
    if not isinstance(meta, dict):
        raise FrontMatterError("Front matter must be a mapping of keys to values.")
    body = "\n".join(lines[end + 1 :])
    return meta, body


def is_excluded(rel_dir: PurePosixPath, name: str) -> bool:
    if name.startswith(".") or name in DEPENDENCY_DIRS:
        return True
    return not rel_dir.parts and name == OUTPUT_DIR


def scan_documents(root: Path) -> list[str]:
    def on_error(exc: OSError) -> None:
        raise SiteIOError(f"Unable to scan {exc.filename}: {exc.strerror}") from exc

    found = []
    for dirpath, dirnames, filenames in os.walk(root, onerror=on_error):
        rel_dir = PurePosixPath(Path(dirpath).relative_to(root).as_posix())
        dirnames[:] = [name for name in dirnames if not is_excluded(rel_dir, name)]
        for name in filenames:
            if not name.endswith(SOURCE_SUFFIX) or name.startswith("."):
                continue
            if not rel_dir.parts and name.lower() == RESERVED_README:
                continue
            found.append((rel_dir / name).as_posix())
    return sorted(found)


def resolve_date(value: object, today: dt.date) -> dt.date:
    if isinstance(value, dt.datetime):
        return value.date()
    if isinstance(value, dt.date):
        return value
    if isinstance(value, str):
        text = value.strip()
        try:
            return dt.date.fromisoformat(text)
        except ValueError:
            pass
        try:
            return dt.datetime.fromisoformat(text.replace("Z", "+00:00")).date()
        except ValueError:
            pass
    return today


def text_field(value: object) -> str:
    if value is None:
        return ""
    if isinstance(value, (list, tuple)):
        return ", ".join(str(item).strip() for item in value if str(item).strip())
    return str(value)


def catalog_path(rel_path: str) -> str:
    rel = PurePosixPath(rel_path)
    return (PurePosixPath(POSTS_SEGMENT) / rel.with_suffix("")).as_posix()


def parse_document(root: Path, rel_path: str, today: dt.date) -> PostWithContent:
    source = root / rel_path
    try:
        raw_text = source.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise SiteIOError(f"Unable to read {rel_path}: {exc}") from exc
    try:
        meta, body = split_front_matter(raw_text)
    except FrontMatterError as exc:
        raise FrontMatterError(f"{rel_path}: {exc}") from exc

    html_content = markdown_to_html(body)
    if not isinstance(html_content, str):
        raise RenderError(
            f"{rel_path}: markdown conversion returned {type(html_content).__name__}, expected text"
        )

    title = meta.get("title")
    return PostWithContent(
        path=catalog_path(rel_path),
        title=str(title) if title else PurePosixPath(rel_path).stem,
        description=text_field(meta.get("description")),
        keywords=text_field(meta.get("keywords")),
        date=resolve_date(meta.get("date"), today).isoformat(),
        metadata=meta,
        content=html_content,
    )


def build_catalog(
    root: Path, files: list[str], today: dt.date, workers: int = 0
) -> list[PostWithContent]:
    if workers <= 0:
        workers = os.cpu_count() or 1
    workers = max(1, min(workers, MAX_WORKERS, len(files) or 1))

    def parse(rel_path: str) -> PostWithContent:
        return parse_document(root, rel_path, today)

    if workers > 1:
        with ThreadPoolExecutor(max_workers=workers) as executor:
            posts = list(executor.map(parse, files))
    else:
        posts = [parse(rel_path) for rel_path in files]

    posts.sort(key=lambda p: p.date_value, reverse=True)
    return posts
