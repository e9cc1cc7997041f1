from __future__ import annotations

import argparse
import datetime as dt
import sys
import time
from pathlib import Path
from typing import Optional

from .config import load_config
from .content import OUTPUT_DIR, build_catalog, scan_documents
from .errors import DiamondError
from .output import write_site
from .pages import build_site_data, build_sitemap, dump_site_data, render_home_page, render_post_pages
from .render import Renderer

VERSION = "0.1.0"


def build_site(root: Path, today: Optional[dt.date] = None, workers: int = 0) -> Path:
    """Run the whole pipeline against ``root`` and return the output directory.

    Each stage consumes the complete result of the previous one. The config is
    loaded before anything under the output directory is touched.
    """
    today = today or dt.date.today()
    config = load_config(root)
    files = scan_documents(root)
    posts = build_catalog(root, files, today, workers=workers)

    site_data = build_site_data(config, posts)
    site_data_json = dump_site_data(site_data)
    sitemap = build_sitemap(config, site_data.posts)

    renderer = Renderer(config)
    pages = render_post_pages(renderer, posts)
    index_html = render_home_page(renderer, site_data.posts)

    return write_site(root, site_data_json, sitemap, pages, index_html)


def report_error(exc: BaseException) -> None:
    print(f"Error building site: {exc}", file=sys.stderr)
    cause = exc.__cause__
    if cause is not None and str(cause) not in str(exc):
        print(f"Caused by: {cause}", file=sys.stderr)


def main(argv: Optional[list[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        prog="diamond", description="Markdown document parser and static site generator."
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {VERSION}")
    subparsers = parser.add_subparsers(dest="command", required=True)
    subparsers.add_parser("build", help="Build the static site from Markdown documents.")
    parser.parse_args(argv)

    start = time.perf_counter()
    try:
        build_site(Path.cwd())
    except DiamondError as exc:
        report_error(exc)
        return 1
    elapsed = time.perf_counter() - start
    print(f"Build completed in {elapsed:.2f}s.")
    print(f"Site generated in: {OUTPUT_DIR}")
    return 0
