"""Tests for diamond.content: front matter, scanning, parsing and the catalog."""

import datetime as dt

import pytest

import diamond.content
from diamond.content import (
    build_catalog,
    catalog_path,
    parse_document,
    resolve_date,
    scan_documents,
    split_front_matter,
)
from diamond.errors import FrontMatterError, RenderError, SiteIOError

BUILD_DATE = dt.date(2024, 6, 15)


class TestSplitFrontMatter:
    def test_no_front_matter(self):
        meta, body = split_front_matter("# Title\n\nText")
        assert meta == {}
        assert body == "# Title\n\nText"

    def test_yaml_block(self):
        meta, body = split_front_matter("---\ntitle: Hi\ntags: [a, b]\n---\n# Hello")
        assert meta == {"title": "Hi", "tags": ["a", "b"]}
        assert body == "# Hello"

    def test_dot_terminator(self):
        meta, body = split_front_matter("---\ntitle: Hi\n...\nBody")
        assert meta == {"title": "Hi"}
        assert body == "Body"

    def test_unclosed_block_is_body(self):
        meta, body = split_front_matter("---\ntitle: Hi\nBody")
        assert meta == {}
        assert body.startswith("---")

    def test_empty_block(self):
        meta, body = split_front_matter("---\n---\nBody")
        assert meta == {}
        assert body == "Body"

    def test_strips_bom(self):
        meta, _ = split_front_matter("\ufeff---\ntitle: Hi\n---\n")
        assert meta == {"title": "Hi"}

    def test_malformed_yaml_raises(self):
        with pytest.raises(FrontMatterError):
            split_front_matter("---\ntitle: [unclosed\n---\nBody")

    def test_non_mapping_raises(self):
        with pytest.raises(FrontMatterError):
            split_front_matter("---\n- a\n- b\n---\nBody")


class TestScanDocuments:
    def test_honors_exclusions(self, tmp_path, write_doc):
        write_doc("notes/a.md", "a")
        write_doc("top.md", "t")
        write_doc("docs/README.md", "nested readme is content")
        write_doc("README.md", "reserved")
        write_doc("node_modules/pkg/x.md", "x")
        write_doc("dist/posts/y.md", "y")
        write_doc(".obsidian/z.md", "z")
        write_doc("notes/.hidden/w.md", "w")
        write_doc("notes/b.txt", "b")
        assert scan_documents(tmp_path) == ["docs/README.md", "notes/a.md", "top.md"]

    def test_nested_dist_is_content(self, tmp_path, write_doc):
        write_doc("guide/dist/a.md", "a")
        assert scan_documents(tmp_path) == ["guide/dist/a.md"]

    def test_empty_directory(self, tmp_path):
        assert scan_documents(tmp_path) == []


class TestResolveDate:
    def test_date_object(self):
        assert resolve_date(dt.date(2024, 1, 1), BUILD_DATE) == dt.date(2024, 1, 1)

    def test_datetime_truncated(self):
        assert resolve_date(dt.datetime(2024, 1, 1, 12, 30), BUILD_DATE) == dt.date(2024, 1, 1)

    def test_iso_strings(self):
        assert resolve_date("2024-03-04", BUILD_DATE) == dt.date(2024, 3, 4)
        assert resolve_date("2024-03-04T10:00:00Z", BUILD_DATE) == dt.date(2024, 3, 4)

    def test_unparseable_falls_back_to_build_date(self):
        assert resolve_date("last tuesday", BUILD_DATE) == BUILD_DATE
        assert resolve_date(20240101, BUILD_DATE) == BUILD_DATE
        assert resolve_date(None, BUILD_DATE) == BUILD_DATE


class TestParseDocument:
    def test_example_document(self, tmp_path, write_doc):
        write_doc("notes/hello.md", '---\ntitle: "Hi"\ndate: "2024-01-01"\n---\n# Hello')
        post = parse_document(tmp_path, "notes/hello.md", BUILD_DATE)
        assert post.path == "posts/notes/hello"
        assert post.title == "Hi"
        assert post.date == "2024-01-01"
        assert post.description == ""
        assert post.keywords == ""
        assert post.metadata == {"title": "Hi", "date": "2024-01-01"}
        assert "Hello</h1>" in post.content

    def test_defaults_without_front_matter(self, tmp_path, write_doc):
        write_doc("notes/plain-note.md", "Just text.")
        post = parse_document(tmp_path, "notes/plain-note.md", BUILD_DATE)
        assert post.title == "plain-note"
        assert post.date == "2024-06-15"
        assert post.metadata == {}

    def test_extra_attributes_preserved(self, tmp_path, write_doc):
        write_doc("a.md", "---\ndescription: About\nkeywords: [x, y]\nauthor: Sam\n---\nBody")
        post = parse_document(tmp_path, "a.md", BUILD_DATE)
        assert post.description == "About"
        assert post.keywords == "x, y"
        assert post.metadata["author"] == "Sam"

    def test_yaml_date_value(self, tmp_path, write_doc):
        write_doc("a.md", "---\ndate: 2023-12-31\n---\nBody")
        assert parse_document(tmp_path, "a.md", BUILD_DATE).date == "2023-12-31"

    def test_non_string_title_coerced(self, tmp_path, write_doc):
        write_doc("a.md", "---\ntitle: 2024\n---\nBody")
        assert parse_document(tmp_path, "a.md", BUILD_DATE).title == "2024"

    def test_missing_file_raises(self, tmp_path):
        with pytest.raises(SiteIOError):
            parse_document(tmp_path, "missing.md", BUILD_DATE)

    def test_front_matter_error_names_file(self, tmp_path, write_doc):
        write_doc("bad.md", "---\ntitle: [oops\n---\n")
        with pytest.raises(FrontMatterError, match="bad.md"):
            parse_document(tmp_path, "bad.md", BUILD_DATE)

    def test_non_text_markdown_result_raises(self, tmp_path, write_doc, monkeypatch):
        write_doc("a.md", "Body")
        monkeypatch.setattr(diamond.content, "markdown_to_html", lambda text: object())
        with pytest.raises(RenderError):
            parse_document(tmp_path, "a.md", BUILD_DATE)

    def test_catalog_path_strips_extension(self):
        assert catalog_path("deep/dir/file.md") == "posts/deep/dir/file"


class TestBuildCatalog:
    def test_sorted_descending_and_stable(self, tmp_path, write_doc):
        write_doc("a.md", "---\ndate: 2024-01-01\n---\n")
        write_doc("b.md", "---\ndate: 2024-01-01\n---\n")
        write_doc("c.md", "---\ndate: 2024-03-01\n---\n")
        write_doc("d.md", "---\ndate: 2024-01-01\n---\n")
        write_doc("e.md", "---\ndate: 2023-01-01\n---\n")
        files = scan_documents(tmp_path)
        posts = build_catalog(tmp_path, files, BUILD_DATE, workers=4)
        assert [p.path for p in posts] == ["posts/c", "posts/a", "posts/b", "posts/d", "posts/e"]

    def test_sequential_and_parallel_agree(self, tmp_path, write_doc):
        for i in range(8):
            write_doc(f"doc{i}.md", f"---\ndate: 2024-01-0{i % 3 + 1}\n---\nBody {i}")
        files = scan_documents(tmp_path)
        assert build_catalog(tmp_path, files, BUILD_DATE, workers=1) == build_catalog(
            tmp_path, files, BUILD_DATE, workers=8
        )

    def test_one_failure_aborts_catalog(self, tmp_path, write_doc):
        write_doc("good.md", "Body")
        write_doc("bad.md", "---\ntitle: [oops\n---\n")
        with pytest.raises(FrontMatterError):
            build_catalog(tmp_path, scan_documents(tmp_path), BUILD_DATE, workers=2)

    def test_empty(self, tmp_path):
        assert build_catalog(tmp_path, [], BUILD_DATE) == []
