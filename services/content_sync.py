"""
Webflow to markdown documentation sync (one-shot batch job).

This module mirrors the published items of a Webflow CMS collection into the site's
documentation folder. A run is a straight fetch-transform-write pipeline:

1. Scan the documents folder for existing markdown files and index them by slug, so
   an item that was synced before keeps its location even if its folder metadata
   changes later (first file found per slug wins).
2. Fetch every item of the collection through `WebflowClient`.
3. For each item, skip it when it is archived, a draft, has no slug, or repeats a slug
   already claimed earlier in this run; otherwise resolve it into a document, pick its
   file path (existing file for the slug, else "{path}/{subpath}/{slug}.md") and render
   it. Slashes in the slug or segments only ever nest folders below the documents
   folder; an item whose path would leave it is skipped.
4. Write the file only when the rendered text differs from what is on disk, so a run
   against unchanged data leaves every file (and its mtime) untouched.
5. Overwrite the manifest with the sorted list of every file the run considers current
   and a fresh timestamp.

The manifest is an audit record only. Write decisions always come from re-reading each
file, which keeps the job idempotent when the manifest is deleted or stale. The previous
manifest is read solely to report files that a run no longer produces; nothing is
deleted automatically.

Any API or filesystem error aborts the run. The job assumes a single invocation at a
time against a given folder.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Protocol, Set

from pydantic import BaseModel, Field, ValidationError

from services.documents import is_published, render_markdown, resolve_document, to_slug
from services.webflow_client import WebflowClient

logger = logging.getLogger(__name__)

DEFAULT_MANIFEST_FILENAME = ".webflow-sync-manifest.json"
MARKDOWN_SUFFIXES = (".md", ".mdx")

TOKEN_ENV = "WEBFLOW_API_TOKEN"
COLLECTION_ENV = "WEBFLOW_ARTICLES_COLLECTION_ID"

SKIP_UNPUBLISHED = "unpublished"
SKIP_MISSING_SLUG = "missing_slug"
SKIP_DUPLICATE_SLUG = "duplicate_slug"
SKIP_UNSAFE_PATH = "unsafe_path"


class ItemSource(Protocol):
    """Anything that can return all raw items of a collection (WebflowClient in production)."""

    def fetch_all_items(self, collection_id: str) -> List[Dict[str, Any]]:
        ...


class SyncManifest(BaseModel):
    """On-disk manifest: when the last run happened and which files it considered current."""

    generatedAt: str = Field(..., description="ISO-8601 UTC timestamp of the run")
    files: List[str] = Field(default_factory=list, description="Sorted, '/'-separated relative paths")


@dataclass
class SyncSettings:
    """
    Inputs of one sync run.

    `base_dir` is the directory relative paths in the manifest are expressed against
    (the project root in production).
    """
    token: Optional[str]
    collection_id: Optional[str]
    docs_dir: Path
    base_dir: Path
    manifest_filename: str = DEFAULT_MANIFEST_FILENAME
    api_base: str = "https://api.webflow.com/v2"
    api_version: str = "2.0.0"
    page_size: int = 100
    timeout_s: float = 30.0

    @property
    def manifest_path(self) -> Path:
        return self.docs_dir / self.manifest_filename

    @property
    def has_credentials(self) -> bool:
        return bool(self.token and self.collection_id)

    @classmethod
    def from_config(cls, config: Mapping[str, Any], environ: Optional[Mapping[str, str]] = None) -> "SyncSettings":
        """Build settings from the CONFIG dict and the (already dot-env loaded) environment."""
        env = os.environ if environ is None else environ
        webflow_cfg = config.get("webflow", {}) or {}
        sync_cfg = config.get("sync", {}) or {}
        return cls(
            token=env.get(TOKEN_ENV) or None,
            collection_id=env.get(COLLECTION_ENV) or None,
            docs_dir=Path(sync_cfg["docs_dir"]),
            base_dir=Path(config["project_root"]),
            manifest_filename=sync_cfg.get("manifest_filename", DEFAULT_MANIFEST_FILENAME),
            api_base=webflow_cfg.get("api_base", "https://api.webflow.com/v2"),
            api_version=webflow_cfg.get("api_version", "2.0.0"),
            page_size=int(webflow_cfg.get("page_size", 100)),
            timeout_s=float(webflow_cfg.get("timeout_s", 30)),
        )


@dataclass
class SyncSummary:
    """
    Counters and file lists of one run.

    Every fetched item ends up in exactly one bucket, so
    `written + unchanged + skipped == total`.
    """
    total: int = 0
    written: int = 0
    unchanged: int = 0
    skipped_reasons: Dict[str, int] = field(default_factory=lambda: {
        SKIP_UNPUBLISHED: 0,
        SKIP_MISSING_SLUG: 0,
        SKIP_DUPLICATE_SLUG: 0,
        SKIP_UNSAFE_PATH: 0,
    })
    files: List[str] = field(default_factory=list)
    stale_files: List[str] = field(default_factory=list)

    @property
    def skipped(self) -> int:
        return sum(self.skipped_reasons.values())

    def skip(self, reason: str) -> None:
        self.skipped_reasons[reason] = self.skipped_reasons.get(reason, 0) + 1


def to_relative(path: Path, base_dir: Path) -> str:
    """Path of `path` relative to `base_dir`, always with forward slashes."""
    return Path(os.path.relpath(path, base_dir)).as_posix()


def find_markdown_files(directory: Path) -> List[Path]:
    """Recursively list .md/.mdx files (case-insensitive) below `directory`, in sorted order."""
    if not directory.is_dir():
        return []
    found: List[Path] = []
    for entry in sorted(directory.iterdir(), key=lambda p: p.name):
        if entry.is_dir():
            found.extend(find_markdown_files(entry))
        elif entry.is_file() and entry.suffix.lower() in MARKDOWN_SUFFIXES:
            found.append(entry)
    return found


def build_slug_index(docs_dir: Path, manifest_path: Path) -> Dict[str, Path]:
    """
    Map normalized file stems to existing document paths.

    The first file seen for a slug wins; later duplicates are ignored.
    """
    index: Dict[str, Path] = {}
    for file_path in find_markdown_files(docs_dir):
        if file_path == manifest_path:
            continue
        slug = to_slug(file_path.stem)
        if not slug:
            continue
        if slug in index:
            logger.debug("Ignoring %s: slug %r already indexed at %s", file_path, slug, index[slug])
            continue
        index[slug] = file_path
    return index


def read_text_exact(path: Path) -> str:
    """Read a UTF-8 file without newline translation."""
    with open(path, "r", encoding="utf-8", newline="") as f:
        return f.read()


def write_text_exact(path: Path, content: str) -> None:
    """Write a UTF-8 file without newline translation."""
    with open(path, "w", encoding="utf-8", newline="") as f:
        f.write(content)


def write_if_changed(path: Path, content: str) -> bool:
    """Write `content` to `path` unless the file already holds exactly that text."""
    if path.exists() and read_text_exact(path) == content:
        return False
    path.parent.mkdir(parents=True, exist_ok=True)
    write_text_exact(path, content)
    return True


def utc_timestamp() -> str:
    """Current UTC time as ISO-8601 with millisecond precision and a trailing "Z"."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def read_manifest(manifest_path: Path) -> List[str]:
    """Return the file list of an existing manifest; missing or unreadable manifests read as empty."""
    if not manifest_path.exists():
        return []
    try:
        return SyncManifest.model_validate_json(read_text_exact(manifest_path)).files
    except (ValidationError, UnicodeDecodeError, OSError) as exc:
        logger.warning("Ignoring unreadable manifest %s: %s", manifest_path, exc)
        return []


def write_manifest(manifest_path: Path, files: List[str]) -> SyncManifest:
    """Overwrite the manifest with `files` (sorted) and a fresh timestamp."""
    manifest = SyncManifest(generatedAt=utc_timestamp(), files=sorted(files))
    manifest_path.parent.mkdir(parents=True, exist_ok=True)
    write_text_exact(manifest_path, manifest.model_dump_json(indent=2) + "\n")
    return manifest


def resolve_output_path(
    slug: str, segments: List[str], docs_dir: Path, slug_index: Mapping[str, Path]
) -> Optional[Path]:
    """
    Pick the file for a document.

    An existing file for the slug is always reused, even when the item's folder metadata
    now points elsewhere; otherwise the file goes to "{docs_dir}/{segments...}/{slug}.md".
    Slugs and segments may carry slashes; they are joined as relative parts only. Returns
    None when no file name remains or the result would land outside `docs_dir`.
    """
    existing = slug_index.get(slug)
    if existing is not None:
        return existing
    parts = [part for value in (*segments, slug) for part in value.split("/") if part]
    if not parts:
        return None
    candidate = docs_dir.joinpath(*parts[:-1], f"{parts[-1]}.md")
    if docs_dir.resolve() not in candidate.resolve().parents:
        return None
    return candidate


def sync_items(items: List[Mapping[str, Any]], settings: SyncSettings) -> SyncSummary:
    """
    Materialize `items` into the documents folder and rewrite the manifest.

    Args:
        items (List[Mapping[str, Any]]): Raw collection items in API order.
        settings (SyncSettings): Target folders and manifest name.

    Returns:
        SyncSummary: Counters, the sorted current file list and stale files.
    """
    docs_dir = settings.docs_dir
    docs_dir.mkdir(parents=True, exist_ok=True)

    previous_files = read_manifest(settings.manifest_path)
    slug_index = build_slug_index(docs_dir, settings.manifest_path)
    logger.info("Indexed %d existing documents under %s", len(slug_index), docs_dir)

    summary = SyncSummary(total=len(items))
    current_files: Set[str] = set()
    claimed: Dict[str, str] = {}

    for item in items:
        if not is_published(item):
            summary.skip(SKIP_UNPUBLISHED)
            continue

        document = resolve_document(item)
        if document is None:
            logger.info("Skipping item %s: no slug could be derived", item.get("id"))
            summary.skip(SKIP_MISSING_SLUG)
            continue

        if document.slug in claimed:
            logger.warning(
                "Skipping item %s: slug %r already used by item %s in this run",
                document.item_id, document.slug, claimed[document.slug],
            )
            summary.skip(SKIP_DUPLICATE_SLUG)
            continue
        claimed[document.slug] = document.item_id

        file_path = resolve_output_path(document.slug, document.segments, docs_dir, slug_index)
        if file_path is None:
            logger.warning(
                "Skipping item %s: slug %r does not map to a file under %s",
                document.item_id, document.slug, docs_dir,
            )
            summary.skip(SKIP_UNSAFE_PATH)
            continue
        if write_if_changed(file_path, render_markdown(document)):
            summary.written += 1
            logger.debug("Wrote %s", file_path)
        else:
            summary.unchanged += 1

        current_files.add(to_relative(file_path, settings.base_dir))

    summary.files = sorted(current_files)
    summary.stale_files = sorted(set(previous_files) - current_files)
    if summary.stale_files:
        logger.warning(
            "%d files from the previous sync are no longer produced: %s",
            len(summary.stale_files), ", ".join(summary.stale_files),
        )

    write_manifest(settings.manifest_path, summary.files)
    return summary


def run_sync(settings: SyncSettings, client: Optional[ItemSource] = None) -> Optional[SyncSummary]:
    """
    Run one sync against Webflow.

    Returns None without touching the filesystem when credentials are missing. Errors
    from the API or the filesystem propagate to the caller.
    """
    if not settings.has_credentials:
        logger.info("Skipping Webflow sync: missing %s or %s", TOKEN_ENV, COLLECTION_ENV)
        return None

    settings.docs_dir.mkdir(parents=True, exist_ok=True)

    owns_client = client is None
    if client is None:
        client = WebflowClient(
            settings.token,
            api_base=settings.api_base,
            api_version=settings.api_version,
            page_size=settings.page_size,
            timeout_s=settings.timeout_s,
        )

    try:
        items = client.fetch_all_items(settings.collection_id)
    finally:
        if owns_client:
            client.close()

    summary = sync_items(items, settings)
    logger.info(
        "Webflow sync complete. Total items: %d, written: %d, skipped: %d",
        summary.total, summary.written, summary.skipped,
        extra={"extra_fields": {"unchanged": summary.unchanged, "skipped_reasons": summary.skipped_reasons}},
    )
    return summary
