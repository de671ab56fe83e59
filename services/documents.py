"""
Turning Webflow CMS items into markdown documents.

Webflow collections are edited by hand and their field names drift over time ("name" vs
"title", "summary" vs "description", several spellings of the video link). This module
resolves each logical field through an ordered list of accessors and returns the first
value that is set, derives the target folder of a document from its path metadata, and
renders the markdown file with its frontmatter block.

Slugs are normalized the same way for item slugs, folder names and existing file names,
which is what lets a later sync run recognise a document it wrote earlier.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Callable, List, Mapping, Optional, Sequence, Tuple

FieldAccessor = Callable[[Mapping[str, Any]], Any]

SOURCE_TAG = "webflow"


def to_slug(value: Any) -> str:
    """
    Normalize free text into a slug.

    Lowercases, drops everything except letters, digits, whitespace, "/" and "-",
    collapses whitespace and hyphen runs into one hyphen, and trims slashes and a
    leading/trailing hyphen. Slashes inside the value are kept.

    >>> to_slug("Getting Started!")
    'getting-started'
    >>> to_slug("  Guides / Setup ")
    'guides-/-setup'
    """
    text = str(value).lower().strip() if value else ""
    text = re.sub(r"[^a-z0-9\s/-]", "", text)
    text = re.sub(r"\s+", "-", text)
    text = re.sub(r"-+", "-", text)
    text = re.sub(r"^/+|/+$", "", text)
    return re.sub(r"^-|-$", "", text)


def escape_frontmatter(value: Any) -> str:
    """Escape backslashes and double quotes for a double-quoted frontmatter value."""
    text = str(value) if value else ""
    return text.replace("\\", "\\\\").replace('"', '\\"')


def field(key: str) -> FieldAccessor:
    """Accessor reading `key` from the item's fieldData, then from the item itself."""
    def accessor(item: Mapping[str, Any]) -> Any:
        field_data = item.get("fieldData")
        if isinstance(field_data, Mapping) and field_data.get(key) is not None:
            return field_data[key]
        return item.get(key)
    return accessor


def fields(*keys: str) -> Tuple[FieldAccessor, ...]:
    return tuple(field(key) for key in keys)


def resolve_field(item: Mapping[str, Any], accessors: Sequence[FieldAccessor]) -> Optional[Any]:
    """Return the first value that is not None among `accessors`, or None."""
    for accessor in accessors:
        value = accessor(item)
        if value is not None:
            return value
    return None


# Logical fields, most specific name first
ARCHIVED_FIELDS = fields("_archived", "isArchived", "archived")
DRAFT_FIELDS = fields("_draft", "isDraft", "draft")
SLUG_FIELDS = fields("slug")
TITLE_FIELDS = fields("name", "title")
DESCRIPTION_FIELDS = fields("summary", "description")
VIDEO_FIELDS = fields("video-link", "video-url", "videourl", "video", "videoUrl")
BODY_FIELDS = fields("body", "content", "post-body", "rich-text")
PATH_FIELDS = fields("path", "category-path", "folder")
SUBPATH_FIELDS = fields("subpath", "sub-path")
SOURCE_FILE_FIELDS = fields("sourcefile", "source-file", "source")


def is_published(item: Mapping[str, Any]) -> bool:
    """An item is published unless it is flagged archived or draft."""
    return not resolve_field(item, ARCHIVED_FIELDS) and not resolve_field(item, DRAFT_FIELDS)


def derive_slug(item: Mapping[str, Any]) -> str:
    """Slug from the explicit slug field, else from the title; "" when neither yields one."""
    return to_slug(resolve_field(item, SLUG_FIELDS) or resolve_field(item, TITLE_FIELDS))


def derive_segments(item: Mapping[str, Any]) -> Tuple[str, str]:
    """
    Derive the (path, subpath) folder segments for an item.

    Explicit path/subpath fields win. Otherwise a slash-delimited source file such as
    "guides/setup/install.md" contributes its first two segments. Items without either
    land at the documents root and get ("", "").
    """
    explicit_path = to_slug(resolve_field(item, PATH_FIELDS) or "")
    explicit_subpath = to_slug(resolve_field(item, SUBPATH_FIELDS) or "")
    source_file = resolve_field(item, SOURCE_FILE_FIELDS)

    if explicit_path:
        return explicit_path.split("/")[0], explicit_subpath

    if isinstance(source_file, str) and "/" in source_file:
        segments = [segment for segment in (to_slug(part) for part in source_file.split("/")) if segment]
        path_segment = segments[0] if segments else ""
        subpath_segment = segments[1] if len(segments) > 1 else ""
        return path_segment, subpath_segment

    return "", ""


def normalize_body(item: Mapping[str, Any]) -> str:
    body = resolve_field(item, BODY_FIELDS)
    if not body:
        return ""
    return str(body).strip()


@dataclass
class ResolvedDocument:
    """
    Everything needed to place and render one published item.

    Built by `resolve_document`; a document exists only for published items with a slug.
    """
    item_id: str
    slug: str
    title: str
    description: str
    video_url: str
    body: str
    path_segment: str
    subpath_segment: str

    @property
    def segments(self) -> List[str]:
        return [segment for segment in (self.path_segment, self.subpath_segment) if segment]


def resolve_document(item: Mapping[str, Any]) -> Optional[ResolvedDocument]:
    """
    Resolve a raw item into a ResolvedDocument.

    Returns None when the item has no derivable slug. Callers check `is_published`
    first, since unpublished items are skipped regardless of their slug.
    """
    slug = derive_slug(item)
    if not slug:
        return None

    path_segment, subpath_segment = derive_segments(item)
    return ResolvedDocument(
        item_id=str(item.get("id") or ""),
        slug=slug,
        title=str(resolve_field(item, TITLE_FIELDS) or slug),
        description=str(resolve_field(item, DESCRIPTION_FIELDS) or ""),
        video_url=str(resolve_field(item, VIDEO_FIELDS) or ""),
        body=normalize_body(item),
        path_segment=path_segment,
        subpath_segment=subpath_segment,
    )


def render_markdown(document: ResolvedDocument) -> str:
    """
    Render the markdown file for a document: frontmatter, blank line, body.

    The whole text is stripped and terminated with exactly one newline, so an empty body
    ends the file right after the closing "---".
    """
    lines = [
        "---",
        f'title: "{escape_frontmatter(document.title)}"',
        f'description: "{escape_frontmatter(document.description)}"',
        f'source: "{SOURCE_TAG}"',
        f'webflowItemId: "{escape_frontmatter(document.item_id)}"',
        f'slug: "{escape_frontmatter(document.slug)}"',
    ]
    if document.video_url:
        lines.append(f'video: "{escape_frontmatter(document.video_url)}"')

    lines.extend(["---", "", document.body])
    return "\n".join(lines).strip() + "\n"
