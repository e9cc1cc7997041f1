from __future__ import annotations

import re
from typing import Iterator

import markdown

LIST_MARKER_RE = re.compile(r"^(?P<indent>[ \t]*)(?:[-+*]|\d+[.)])\s+")
FENCE_RE = re.compile(r"^(?P<indent>[ \t]*)(`{3,}|~{3,})")
MARKDOWN_EXTENSIONS = ["fenced_code", "tables", "toc", "codehilite"]
MARKDOWN_EXTENSION_CONFIGS = {"codehilite": {"guess_lang": False}}


def tag_fenced_lines(lines: list[str]) -> Iterator[tuple[str, bool]]:
    marker = ""
    for line in lines:
        match = FENCE_RE.match(line)
        if match and (not marker or match.group(2) == marker):
            marker = "" if marker else match.group(2)
            yield line, True
        else:
            yield line, bool(marker)


def opens_top_level_list(previous: str, line: str) -> bool:
    match = LIST_MARKER_RE.match(line)
    if not match or match.group("indent"):
        return False
    return bool(previous.strip()) and not LIST_MARKER_RE.match(previous)


def normalize_list_spacing(text: str) -> str:
    # Python-Markdown only starts a list after a blank line.
    out: list[str] = []
    for line, fenced in tag_fenced_lines(text.splitlines()):
        if not fenced and out and opens_top_level_list(out[-1], line):
            out.append("")
        out.append(line)
    return "\n".join(out)


def markdown_to_html(text: str) -> str:
    # A fresh converter per call keeps parallel parses independent.
    md = markdown.Markdown(
        extensions=MARKDOWN_EXTENSIONS,
        extension_configs=MARKDOWN_EXTENSION_CONFIGS,
    )
    return md.convert(normalize_list_spacing(text))
