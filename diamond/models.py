from __future__ import annotations

import datetime as dt
from dataclasses import dataclass, field
from typing import Any, Optional


@dataclass(frozen=True)
class Theme:
    primary: str
    secondary: str

    def to_dict(self) -> dict:
        return {"primary": self.primary, "secondary": self.secondary}


@dataclass(frozen=True)
class Config:
    title: Any
    description: Any
    keywords: Any
    base_url: str
    theme: Optional[Theme] = None

    def to_dict(self) -> dict:
        return {
            "title": self.title,
            "description": self.description,
            "keywords": self.keywords,
            "baseUrl": self.base_url,
            "theme": self.theme.to_dict() if self.theme else None,
        }


@dataclass(frozen=True)
class Post:
    path: str
    title: str
    description: str
    keywords: str
    date: str
    metadata: dict = field(default_factory=dict, compare=False)

    @property
    def date_value(self) -> dt.date:
        return dt.date.fromisoformat(self.date)

    def to_dict(self) -> dict:
        return {
            "path": self.path,
            "title": self.title,
            "description": self.description,
            "keywords": self.keywords,
            "date": self.date,
            "metadata": self.metadata,
        }


@dataclass(frozen=True)
class PostWithContent(Post):
    content: str = ""

    def strip_content(self) -> Post:
        return Post(
            path=self.path,
            title=self.title,
            description=self.description,
            keywords=self.keywords,
            date=self.date,
            metadata=self.metadata,
        )


@dataclass(frozen=True)
class SiteData:
    config: Config
    posts: tuple[Post, ...] = ()

    def to_dict(self) -> dict:
        return {
            "config": self.config.to_dict(),
            "posts": [post.to_dict() for post in self.posts],
        }
