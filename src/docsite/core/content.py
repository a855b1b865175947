"""Blog content documents.

Documents are front-matter headers followed by an opaque text body:

    ---
    layout: post
    title: Caching at the edge
    date: 2023-10-05
    timeToRead: 6
    featured: true
    ---
    Body text...

The header is treated as plain data. The body is never rendered here.
"""

import datetime as dt
import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, TypedDict

import yaml

from docsite.core.errors import ContentError
from docsite.core.types import URLPath

logger = logging.getLogger(__name__)

FRONT_MATTER_PATTERN = re.compile(
    r"\A---[ \t]*\r?\n(.*?)^---[ \t]*(?:\r?\n|\Z)",
    re.DOTALL | re.MULTILINE,
)

INDEX_FILENAMES = ("index.md", "+page.markdoc")


class ContentMetadataDict(TypedDict, total=False):
    """Dictionary representation of document metadata."""

    layout: str
    title: str
    description: str
    date: str
    cover: str
    timeToRead: int
    author: str
    category: str
    featured: bool


@dataclass(frozen=True)
class ContentMetadata:
    """Recognized front-matter keys of a content document."""

    title: str
    layout: str | None = None
    description: str | None = None
    date: dt.date | None = None
    cover: str | None = None
    time_to_read: int | None = None
    author: str | None = None
    category: str | None = None
    featured: bool = False

    def to_dict(self) -> ContentMetadataDict:
        """Convert to dictionary using front-matter key names."""
        result: ContentMetadataDict = {"title": self.title, "featured": self.featured}
        if self.layout is not None:
            result["layout"] = self.layout
        if self.description is not None:
            result["description"] = self.description
        if self.date is not None:
            result["date"] = self.date.isoformat()
        if self.cover is not None:
            result["cover"] = self.cover
        if self.time_to_read is not None:
            result["timeToRead"] = self.time_to_read
        if self.author is not None:
            result["author"] = self.author
        if self.category is not None:
            result["category"] = self.category
        return result


@dataclass(frozen=True)
class ContentDocument:
    """Parsed content document."""

    slug: str
    path: URLPath
    metadata: ContentMetadata
    body: str
    source_path: Path | None = None


def split_front_matter(text: str) -> tuple[dict[str, Any], str]:
    """Split a document into its front-matter mapping and body.

    Args:
        text: Raw document text

    Returns:
        Tuple of (header mapping, body). Header is empty when absent.

    Raises:
        ContentError: If the header is not valid YAML or not a mapping
    """
    match = FRONT_MATTER_PATTERN.match(text)
    if match is None:
        return {}, text

    try:
        header = yaml.safe_load(match.group(1))
    except yaml.YAMLError as e:
        raise ContentError(f"Invalid front matter: {e}") from e

    if header is None:
        header = {}
    if not isinstance(header, dict):
        raise ContentError("Front matter must be a mapping")

    return header, text[match.end() :]


def parse_document(
    text: str,
    slug: str,
    *,
    url_prefix: str = "/blog",
    source_path: Path | None = None,
) -> ContentDocument:
    """Parse a content document.

    Args:
        text: Raw document text
        slug: Document slug (last URL segment)
        url_prefix: URL prefix the document is served under
        source_path: File the text was read from

    Returns:
        ContentDocument with metadata and opaque body

    Raises:
        ContentError: If front matter is malformed or has wrongly typed keys
    """
    try:
        header, body = split_front_matter(text)
        metadata = _parse_metadata(header)
    except ContentError as e:
        if source_path is None or e.path is not None:
            raise
        raise ContentError(str(e), str(source_path)) from e

    prefix = url_prefix.rstrip("/")
    return ContentDocument(
        slug=slug,
        path=URLPath(f"{prefix}/{slug}"),
        metadata=metadata,
        body=body,
        source_path=source_path,
    )


def _parse_metadata(header: dict[str, Any]) -> ContentMetadata:
    title = _optional_str(header, "title")
    if title is None:
        raise ContentError("title is required")

    time_to_read = header.get("timeToRead")
    if time_to_read is not None and (
        isinstance(time_to_read, bool) or not isinstance(time_to_read, int)
    ):
        raise ContentError("timeToRead must be an integer")

    featured = header.get("featured", False)
    if not isinstance(featured, bool):
        raise ContentError("featured must be a boolean")

    return ContentMetadata(
        title=title,
        layout=_optional_str(header, "layout"),
        description=_optional_str(header, "description"),
        date=_parse_date(header.get("date")),
        cover=_optional_str(header, "cover"),
        time_to_read=time_to_read,
        author=_optional_str(header, "author"),
        category=_optional_str(header, "category"),
        featured=featured,
    )


def _optional_str(header: dict[str, Any], key: str) -> str | None:
    value = header.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise ContentError(f"{key} must be a string")
    return value


def _parse_date(value: object) -> dt.date | None:
    if value is None:
        return None
    # datetime is a date subclass, check it first
    if isinstance(value, dt.datetime):
        return value.date()
    if isinstance(value, dt.date):
        return value
    if isinstance(value, str):
        try:
            return dt.date.fromisoformat(value.strip()[:10])
        except ValueError as e:
            raise ContentError(f"date is not an ISO date: {value!r}") from e
    raise ContentError("date must be a date")


class ContentLibrary:
    """Read-only index of content documents in a directory.

    Discovers `<slug>.md` files and `<slug>/index.md` (or `+page.markdoc`)
    directories. The index is built lazily and kept until invalidated.
    Documents that fail to parse are skipped with a warning.
    """

    def __init__(self, source_dir: Path, url_prefix: str = "/blog") -> None:
        """Initialize content library.

        Args:
            source_dir: Directory containing content documents
            url_prefix: URL prefix documents are served under
        """
        self._source_dir = source_dir
        self._url_prefix = url_prefix
        self._documents: dict[str, ContentDocument] | None = None

    @property
    def source_dir(self) -> Path:
        """Directory containing content documents."""
        return self._source_dir

    @property
    def url_prefix(self) -> str:
        return self._url_prefix

    def get(self, slug: str) -> ContentDocument | None:
        """Get document by slug, None if unknown."""
        return self._load().get(slug)

    def list_documents(
        self,
        *,
        category: str | None = None,
        featured: bool | None = None,
    ) -> list[ContentDocument]:
        """List documents, newest first.

        Args:
            category: Only include documents in this category
            featured: Only include documents with this featured flag

        Returns:
            Documents sorted by date descending, undated last, then by slug
        """
        documents = [
            doc
            for doc in self._load().values()
            if (category is None or doc.metadata.category == category)
            and (featured is None or doc.metadata.featured == featured)
        ]
        documents.sort(key=lambda doc: doc.slug)
        documents.sort(
            key=lambda doc: doc.metadata.date or dt.date.min,
            reverse=True,
        )
        return documents

    def slug_for(self, file_path: Path) -> str | None:
        """Map a source file to its document slug.

        Returns:
            Slug, or None if the file is not a content document
        """
        try:
            relative = file_path.relative_to(self._source_dir)
        except ValueError:
            return None

        parts = relative.parts
        if len(parts) == 1 and relative.suffix == ".md" and relative.name not in INDEX_FILENAMES:
            return relative.stem
        if len(parts) == 2 and parts[1] in INDEX_FILENAMES:
            return parts[0]
        return None

    def invalidate(self) -> None:
        """Drop the cached index so the next access rescans the directory."""
        self._documents = None

    def _load(self) -> dict[str, ContentDocument]:
        if self._documents is None:
            self._documents = self._scan()
        return self._documents

    def _scan(self) -> dict[str, ContentDocument]:
        documents: dict[str, ContentDocument] = {}
        if not self._source_dir.is_dir():
            logger.debug("Content directory does not exist: %s", self._source_dir)
            return documents

        for file_path in sorted(self._candidate_files()):
            slug = self.slug_for(file_path)
            if slug is None or slug in documents:
                continue
            try:
                text = file_path.read_text(encoding="utf-8")
                documents[slug] = parse_document(
                    text,
                    slug,
                    url_prefix=self._url_prefix,
                    source_path=file_path,
                )
            except (OSError, UnicodeDecodeError, ContentError) as e:
                logger.warning("Skipping content document %s: %s", file_path, e)

        logger.debug("Loaded %d content document(s) from %s", len(documents), self._source_dir)
        return documents

    def _candidate_files(self) -> list[Path]:
        files = [p for p in self._source_dir.glob("*.md") if p.is_file()]
        for index_name in INDEX_FILENAMES:
            files.extend(p for p in self._source_dir.glob(f"*/{index_name}") if p.is_file())
        return files
