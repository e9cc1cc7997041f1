from __future__ import annotations

import json
from typing import Sequence
from xml.sax.saxutils import escape

from .errors import RenderError
from .models import Config, Post, PostWithContent, SiteData
from .render import Renderer
from .utils import join_url, json_default, normalize_base_url

SITEMAP_NS = "http://www.sitemaps.org/schemas/sitemap/0.9"


def build_site_data(config: Config, posts: Sequence[PostWithContent]) -> SiteData:
    return SiteData(config=config, posts=tuple(post.strip_content() for post in posts))


def dump_site_data(site_data: SiteData) -> str:
    try:
        return json.dumps(site_data.to_dict(), indent=2, ensure_ascii=True, default=json_default)
    except (TypeError, ValueError) as exc:
        raise RenderError(f"Unable to serialize site data: {exc}") from exc


def sitemap_entry(loc: str, changefreq: str, priority: str, lastmod: str = "") -> str:
    lastmod_tag = f"<lastmod>{escape(lastmod)}</lastmod>" if lastmod else ""
    return (
        f"<url><loc>{escape(loc)}</loc>{lastmod_tag}"
        f"<changefreq>{changefreq}</changefreq><priority>{priority}</priority></url>"
    )


def build_sitemap(config: Config, posts: Sequence[Post]) -> str:
    base_url = normalize_base_url(config.base_url)
    items = [sitemap_entry(base_url, "daily", "1.0")]
    for post in posts:
        items.append(sitemap_entry(join_url(base_url, f"{post.path}.html"), "weekly", "0.8", post.date))
    return "\n".join(
        [
            '<?xml version="1.0" encoding="UTF-8"?>',
            f'<urlset xmlns="{SITEMAP_NS}">',
            "\n".join(items),
            "</urlset>",
        ]
    )


def render_post_pages(renderer: Renderer, posts: Sequence[PostWithContent]) -> list[tuple[Post, str]]:
    pages = []
    for post in posts:
        props = {
            "title": post.title,
            "description": post.description,
            "keywords": post.keywords,
            "path": post.path,
            "date": post.date,
            "content": post.content,
        }
        pages.append((post.strip_content(), renderer.render("post", props)))
    return pages


def render_home_page(renderer: Renderer, posts: Sequence[Post]) -> str:
    return renderer.render("home", {"posts": list(posts)})
