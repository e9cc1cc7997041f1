from __future__ import annotations

import shutil
import tempfile
from pathlib import Path
from typing import Sequence

from .content import OUTPUT_DIR, POSTS_SEGMENT
from .errors import SiteIOError
from .models import Post
from .utils import check_output_dir

SITE_DATA_FILE = "site-data.json"
SITEMAP_FILE = "sitemap.xml"
INDEX_FILE = "index.html"
STAGING_PREFIX = f".{OUTPUT_DIR}-build-"
PREVIOUS_PREFIX = f".{OUTPUT_DIR}-previous-"


def write_text(path: Path, text: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")


def populate(target: Path, site_data_json: str, sitemap: str, pages: Sequence[tuple[Post, str]], index_html: str) -> None:
    (target / POSTS_SEGMENT).mkdir(parents=True, exist_ok=True)
    write_text(target / SITE_DATA_FILE, site_data_json)
    write_text(target / SITEMAP_FILE, sitemap)
    for post, document in pages:
        write_text(target / f"{post.path}.html", document)
    write_text(target / INDEX_FILE, index_html)


def swap_into_place(staging: Path, output_dir: Path) -> None:
    previous = None
    if output_dir.exists():
        previous = staging.with_name(PREVIOUS_PREFIX + staging.name[len(STAGING_PREFIX) :])
        try:
            output_dir.rename(previous)
        except OSError as exc:
            shutil.rmtree(staging, ignore_errors=True)
            raise SiteIOError(f"Unable to move aside previous output {output_dir}: {exc}") from exc

    try:
        staging.rename(output_dir)
    except OSError as exc:
        if previous is not None:
            try:
                previous.rename(output_dir)
            except OSError as restore_exc:
                raise SiteIOError(
                    f"Unable to replace {output_dir}: {exc}; previous output kept at {previous}, "
                    f"new output kept at {staging} ({restore_exc})"
                ) from exc
        shutil.rmtree(staging, ignore_errors=True)
        raise SiteIOError(f"Unable to replace {output_dir}: {exc}") from exc

    if previous is not None:
        try:
            shutil.rmtree(previous)
        except OSError as exc:
            raise SiteIOError(f"Site written, but unable to remove previous output {previous}: {exc}") from exc


def write_site(
    root: Path,
    site_data_json: str,
    sitemap: str,
    pages: Sequence[tuple[Post, str]],
    index_html: str,
) -> Path:
    output_dir = root / OUTPUT_DIR
    check_output_dir(output_dir, root)
    try:
        staging = Path(tempfile.mkdtemp(prefix=STAGING_PREFIX, dir=root))
    except OSError as exc:
        raise SiteIOError(f"Unable to create staging directory in {root}: {exc}") from exc

    try:
        staging.chmod(0o755)
        populate(staging, site_data_json, sitemap, pages, index_html)
    except (OSError, UnicodeError) as exc:
        shutil.rmtree(staging, ignore_errors=True)
        raise SiteIOError(f"Unable to write output to {output_dir}: {exc}") from exc

    swap_into_place(staging, output_dir)
    return output_dir
