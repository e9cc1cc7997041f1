from __future__ import annotations


class DiamondError(Exception):
    """Base class for every failure that aborts a build."""


class ConfigError(DiamondError):
    pass


class SiteIOError(DiamondError):
    pass


class FrontMatterError(DiamondError):
    pass


class RenderError(DiamondError):
    pass
