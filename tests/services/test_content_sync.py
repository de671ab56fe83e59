"""
Tests for `services/content_sync.py` – the Webflow to markdown sync pipeline.

Each test works in its own temporary project directory and feeds items through a fake
item source instead of the real Webflow client, so no network access is involved. The
tests cover the documented example, idempotent re-runs, stable file locations across
metadata edits, skip accounting, slug collisions and the manifest format.
"""

import json
import os
from typing import Any, Dict, List

import pytest

from services.content_sync import (
    SKIP_DUPLICATE_SLUG,
    SKIP_MISSING_SLUG,
    SKIP_UNPUBLISHED,
    SKIP_UNSAFE_PATH,
    SyncSettings,
    build_slug_index,
    read_manifest,
    resolve_output_path,
    run_sync,
    sync_items,
    to_relative,
)


class FakeSource:
    """Item source returning a fixed list and remembering which collection was asked for."""

    def __init__(self, items: List[Dict[str, Any]]) -> None:
        self.items = items
        self.collections: List[str] = []

    def fetch_all_items(self, collection_id: str) -> List[Dict[str, Any]]:
        self.collections.append(collection_id)
        return list(self.items)


@pytest.fixture
def settings(tmp_path):
    return SyncSettings(
        token="token",
        collection_id="collection-1",
        docs_dir=tmp_path / "src" / "content" / "docs",
        base_dir=tmp_path,
    )


def _item(item_id: str, **field_data: Any) -> Dict[str, Any]:
    return {"id": item_id, "fieldData": field_data}


def _load_manifest(settings: SyncSettings) -> Dict[str, Any]:
    return json.loads(settings.manifest_path.read_text(encoding="utf-8"))


def test_example_item_lands_at_docs_root(settings):
    item = {"id": "abc", "slug": "Getting Started!", "name": "Getting Started", "body": "Hello"}

    summary = sync_items([item], settings)

    target = settings.docs_dir / "getting-started.md"
    text = target.read_text(encoding="utf-8")
    assert 'slug: "getting-started"' in text
    assert 'webflowItemId: "abc"' in text
    assert 'source: "webflow"' in text
    assert text.endswith("---\n\nHello\n")
    assert summary.written == 1
    assert summary.files == ["src/content/docs/getting-started.md"]


def test_second_run_is_a_no_op(settings):
    items = [
        _item("1", slug="alpha", name="Alpha", body="A"),
        _item("2", slug="beta", name="Beta", body="B", path="Guides", subpath="Setup"),
    ]
    first = sync_items(items, settings)
    first_manifest = _load_manifest(settings)

    # Push mtimes into the past so an accidental rewrite would be visible
    for relative in first.files:
        os.utime(settings.base_dir / relative, (1_000_000, 1_000_000))

    second = sync_items(items, settings)

    assert first.written == 2
    assert second.written == 0
    assert second.unchanged == 2
    assert _load_manifest(settings)["files"] == first_manifest["files"]
    for relative in second.files:
        assert os.stat(settings.base_dir / relative).st_mtime == 1_000_000


def test_changed_content_is_rewritten(settings):
    sync_items([_item("1", slug="alpha", name="Alpha", body="old")], settings)

    summary = sync_items([_item("1", slug="alpha", name="Alpha", body="new")], settings)

    assert summary.written == 1
    assert (settings.docs_dir / "alpha.md").read_text(encoding="utf-8").endswith("new\n")


def test_existing_file_location_is_reused(settings):
    legacy = settings.docs_dir / "legacy" / "old" / "install-guide.md"
    legacy.parent.mkdir(parents=True)
    legacy.write_text("stale", encoding="utf-8")

    summary = sync_items(
        [_item("9", slug="Install Guide", name="Install", body="Steps", path="Guides", subpath="Setup")],
        settings,
    )

    assert "Steps" in legacy.read_text(encoding="utf-8")
    assert not (settings.docs_dir / "guides").exists()
    assert summary.files == ["src/content/docs/legacy/old/install-guide.md"]


def test_new_items_use_derived_folders(settings):
    sync_items([
        _item("1", slug="intro", name="Intro", path="Guides", subpath="Setup"),
        _item("2", slug="api", name="API", sourcefile="Reference/Endpoints/api.md"),
    ], settings)

    assert (settings.docs_dir / "guides" / "setup" / "intro.md").is_file()
    assert (settings.docs_dir / "reference" / "endpoints" / "api.md").is_file()


def test_skip_accounting(settings):
    items = [
        _item("1", slug="published", name="Published"),
        {"id": "2", "isArchived": True, "fieldData": {"slug": "archived"}},
        {"id": "3", "isDraft": True, "fieldData": {"slug": "draft"}},
        _item("4", body="no slug or title"),
    ]

    summary = sync_items(items, settings)

    assert summary.total == 4
    assert summary.written == 1
    assert summary.skipped == 3
    assert summary.skipped_reasons[SKIP_UNPUBLISHED] == 2
    assert summary.skipped_reasons[SKIP_MISSING_SLUG] == 1
    assert summary.written + summary.unchanged + summary.skipped == summary.total
    assert not (settings.docs_dir / "archived.md").exists()
    assert not (settings.docs_dir / "draft.md").exists()


def test_archived_item_does_not_update_existing_file(settings):
    existing = settings.docs_dir / "retired.md"
    existing.parent.mkdir(parents=True)
    existing.write_text("keep me", encoding="utf-8")

    summary = sync_items([_item("1", slug="retired", name="Retired", _archived=True)], settings)

    assert existing.read_text(encoding="utf-8") == "keep me"
    assert summary.skipped == 1
    assert summary.files == []


def test_duplicate_slug_keeps_first_item(settings):
    items = [
        _item("first", slug="shared", name="First"),
        _item("second", slug="Shared", name="Second"),
    ]

    summary = sync_items(items, settings)

    text = (settings.docs_dir / "shared.md").read_text(encoding="utf-8")
    assert 'title: "First"' in text
    assert summary.written == 1
    assert summary.skipped_reasons[SKIP_DUPLICATE_SLUG] == 1


def test_manifest_format(settings):
    sync_items([_item("2", slug="zeta"), _item("1", slug="alpha")], settings)

    raw = settings.manifest_path.read_text(encoding="utf-8")
    manifest = json.loads(raw)

    assert raw.endswith("}\n")
    assert raw.splitlines()[1].startswith('  "generatedAt": ')
    assert manifest["generatedAt"].endswith("Z")
    assert manifest["files"] == ["src/content/docs/alpha.md", "src/content/docs/zeta.md"]


def test_manifest_is_not_used_for_write_decisions(settings):
    items = [_item("1", slug="alpha", name="Alpha")]
    sync_items(items, settings)
    settings.manifest_path.unlink()
    (settings.docs_dir / "alpha.md").unlink()

    summary = sync_items(items, settings)

    assert summary.written == 1
    assert (settings.docs_dir / "alpha.md").is_file()


def test_stale_files_are_reported_not_deleted(settings):
    sync_items([_item("1", slug="alpha"), _item("2", slug="beta")], settings)

    summary = sync_items([_item("1", slug="alpha")], settings)

    assert summary.stale_files == ["src/content/docs/beta.md"]
    assert (settings.docs_dir / "beta.md").is_file()


def test_corrupt_manifest_reads_as_empty(settings):
    settings.docs_dir.mkdir(parents=True)
    settings.manifest_path.write_text("{not json", encoding="utf-8")

    assert read_manifest(settings.manifest_path) == []


def test_slug_index_first_occurrence_wins(settings):
    docs = settings.docs_dir
    (docs / "a").mkdir(parents=True)
    (docs / "b").mkdir()
    (docs / "a" / "Setup Guide.md").write_text("", encoding="utf-8")
    (docs / "b" / "setup-guide.MDX").write_text("", encoding="utf-8")
    (docs / "notes.txt").write_text("", encoding="utf-8")

    index = build_slug_index(docs, settings.manifest_path)

    assert index == {"setup-guide": docs / "a" / "Setup Guide.md"}


def test_to_relative_uses_forward_slashes(tmp_path):
    assert to_relative(tmp_path / "docs" / "a" / "b.md", tmp_path) == "docs/a/b.md"


def test_run_sync_without_credentials_is_a_no_op(settings):
    settings.token = None
    source = FakeSource([_item("1", slug="alpha")])

    assert run_sync(settings, client=source) is None
    assert source.collections == []
    assert not settings.docs_dir.exists()


def test_run_sync_fetches_collection_and_writes(settings):
    source = FakeSource([_item("1", slug="alpha", name="Alpha")])

    summary = run_sync(settings, client=source)

    assert source.collections == ["collection-1"]
    assert summary.written == 1
    assert (settings.docs_dir / "alpha.md").is_file()


def test_run_sync_propagates_fetch_errors(settings):
    class BrokenSource:
        def fetch_all_items(self, collection_id):
            raise RuntimeError("Webflow API error 500: boom")

    with pytest.raises(RuntimeError, match="500"):
        run_sync(settings, client=BrokenSource())
    assert not settings.manifest_path.exists()


def test_settings_from_config(tmp_path):
    config = {
        "project_root": str(tmp_path),
        "webflow": {"api_base": "https://example.test/v2", "page_size": 50, "timeout_s": 5},
        "sync": {"docs_dir": str(tmp_path / "docs"), "manifest_filename": "m.json"},
    }

    settings = SyncSettings.from_config(
        config,
        environ={"WEBFLOW_API_TOKEN": "t", "WEBFLOW_ARTICLES_COLLECTION_ID": ""},
    )

    assert settings.token == "t"
    assert settings.collection_id is None
    assert not settings.has_credentials
    assert settings.page_size == 50
    assert settings.manifest_path == tmp_path / "docs" / "m.json"


def test_slug_with_leading_slash_stays_inside_docs(settings):
    summary = sync_items([_item("x", slug="-/outside/escaped", name="Escaped")], settings)

    target = settings.docs_dir / "outside" / "escaped.md"
    assert target.is_file()
    assert summary.files == ["src/content/docs/outside/escaped.md"]
    assert not (settings.base_dir / "outside").exists()


def test_subpath_with_leading_slash_stays_inside_docs(settings):
    summary = sync_items(
        [_item("x", slug="page", name="Page", path="Guides", subpath="-/outside")],
        settings,
    )

    assert (settings.docs_dir / "guides" / "outside" / "page.md").is_file()
    assert summary.files == ["src/content/docs/guides/outside/page.md"]


def test_slug_without_file_name_is_skipped(settings):
    summary = sync_items([_item("x", slug="-/-", name="Nothing")], settings)

    assert summary.written == 0
    assert summary.skipped_reasons[SKIP_UNSAFE_PATH] == 1
    assert summary.written + summary.unchanged + summary.skipped == summary.total


def test_output_path_is_always_under_docs_dir(tmp_path):
    docs = tmp_path / "docs"

    assert resolve_output_path("/abs/name", ["/etc", ""], docs, {}) == docs / "etc" / "abs" / "name.md"
    assert resolve_output_path("/", [], docs, {}) is None


def test_undecodable_manifest_reads_as_empty(settings):
    settings.docs_dir.mkdir(parents=True)
    settings.manifest_path.write_bytes(b"\xff\xfe garbage")

    assert read_manifest(settings.manifest_path) == []

    summary = sync_items([_item("1", slug="alpha", name="Alpha")], settings)

    assert summary.written == 1
    assert (settings.docs_dir / "alpha.md").is_file()
    assert _load_manifest(settings)["files"] == ["src/content/docs/alpha.md"]


def test_manifest_path_that_is_a_directory_reads_as_empty(tmp_path):
    manifest_dir = tmp_path / "manifest.json"
    manifest_dir.mkdir()

    assert read_manifest(manifest_dir) == []
