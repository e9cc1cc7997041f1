from __future__ import annotations

import html
import re
from pathlib import Path, PurePosixPath

from .errors import RenderError
from .models import Config, Post
from .utils import join_url, normalize_base_url

TEMPLATES_DIR = Path(__file__).parent / "templates"
DOCTYPE = "<!DOCTYPE html>"
RECENT_LIMIT = 5
VIEWS = ("post", "home")
PLACEHOLDER_RE = re.compile(r"\{\{(\w+)\}\}")


def render_template(template: str, **context: str) -> str:
    # Single pass: inserted values are never scanned for placeholders again.
    return PLACEHOLDER_RE.sub(lambda m: context.get(m.group(1), m.group(0)), template)


def read_template(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except OSError as exc:
        raise RenderError(f"Unable to read template {path}: {exc}") from exc


def escape(value: object) -> str:
    return html.escape("" if value is None else str(value))


def root_for(path: str) -> str:
    depth = len(PurePosixPath(path).parts) - 1
    return "/".join([".."] * depth) if depth > 0 else "."


def theme_style(config: Config) -> str:
    if config.theme is None:
        return ""
    return (
        "<style>:root { "
        f"--color-primary: {escape(config.theme.primary)}; "
        f"--color-secondary: {escape(config.theme.secondary)}; "
        "}</style>"
    )


class Renderer:
    def __init__(self, config: Config, templates_dir: Path = TEMPLATES_DIR) -> None:
        self.config = config
        self.base_template = read_template(templates_dir / "base.html")
        self.view_templates = {view: read_template(templates_dir / f"{view}.html") for view in VIEWS}

    def render(self, view: str, props: dict) -> str:
        if view == "post":
            document = self.render_post(props)
        elif view == "home":
            document = self.render_home(props)
        else:
            raise RenderError(f"Unknown view: {view}")
        if not isinstance(document, str):
            raise RenderError(f"View {view} produced {type(document).__name__}, expected text")
        return f"{DOCTYPE}\n{document}"

    def render_layout(
        self, title: object, description: object, keywords: object, canonical: str, root: str, body: str
    ) -> str:
        return render_template(
            self.base_template,
            title=escape(title),
            description=escape(description),
            keywords=escape(keywords),
            canonical=escape(canonical),
            root=root,
            site_title=escape(self.config.title),
            theme_style=theme_style(self.config),
            content=body,
        )

    def render_post(self, props: dict) -> str:
        path = props["path"]
        root = root_for(path)
        body = render_template(
            self.view_templates["post"],
            title=escape(props["title"]),
            date=escape(props["date"]),
            root=root,
            content=props["content"],
        )
        canonical = join_url(normalize_base_url(self.config.base_url), f"{path}.html")
        return self.render_layout(
            props["title"], props["description"], props["keywords"], canonical, root, body
        )

    def render_home(self, props: dict) -> str:
        posts: list[Post] = list(props["posts"])
        root = "."
        nav_items = [
            f'<li><a href="{root}/{escape(post.path)}.html">{escape(post.title)}</a></li>'
            for post in posts[:RECENT_LIMIT]
        ]
        cards = []
        for post in posts:
            url = f"{root}/{escape(post.path)}.html"
            description = f'<p class="post-summary">{escape(post.description)}</p>' if post.description else ""
            cards.append(
                '<article class="post-card">'
                f'<h2 class="post-title"><a href="{url}">{escape(post.title)}</a></h2>'
                f'<div class="post-date">{escape(post.date)}</div>'
                f"{description}"
                f'<a class="post-more" href="{url}">Read more &rarr;</a>'
                "</article>"
            )
        listing = "\n".join(cards) if cards else '<p class="post-empty">No posts yet.</p>'
        body = render_template(
            self.view_templates["home"],
            root=root,
            nav="\n".join(nav_items),
            content=listing,
        )
        canonical = normalize_base_url(self.config.base_url)
        return self.render_layout(
            self.config.title, self.config.description, self.config.keywords, canonical, root, body
        )
