"""
Data models for tabdedup.

All models are plain dataclasses created fresh for every clustering run.
Nothing here is cached or persisted between calls.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

from tabdedup.constants import MAX_TEXT_LENGTH


def _as_text(value: Any) -> str:
    """Missing or malformed text fields count as empty."""
    return value if isinstance(value, str) else ""


def _as_mapping(value: Any) -> Mapping[str, Any]:
    """Nested snapshot sections that are not objects count as missing."""
    return value if isinstance(value, Mapping) else {}


@dataclass
class InputItem:
    """
    One tab (or page) to compare.

    ``text`` is the content to compare. When it is empty the title is used,
    and when that is empty too the URL.
    """
    id: str
    text: str = ""
    title: str = ""
    url: str = ""

    def __post_init__(self):
        self.id = str(self.id)
        self.text = _as_text(self.text)
        self.title = _as_text(self.title)
        self.url = _as_text(self.url)

    @property
    def effective_text(self) -> str:
        """Text that is actually fingerprinted, capped to MAX_TEXT_LENGTH."""
        return (self.text or self.title or self.url)[:MAX_TEXT_LENGTH]

    @classmethod
    def from_item(cls, record: Mapping[str, Any]) -> "InputItem":
        """Build from a flat ``{id, text, title?, url?}`` record."""
        item_id = record.get("id")
        if item_id is None:
            item_id = record.get("tabId")
        return cls(
            id=item_id,
            text=record.get("text"),
            title=record.get("title"),
            url=record.get("url"),
        )

    @classmethod
    def from_snapshot(cls, record: Mapping[str, Any]) -> "InputItem":
        """
        Build from a tab snapshot as exported by the browser extension.

        Snapshots look like ``{tabId, tabInfo: {...}, pageData: {...}}``. The
        compared text is the first non-empty of the extracted page text, the
        main content, the meta description and the Open Graph description.
        """
        tab_info = _as_mapping(record.get("tabInfo"))
        page = _as_mapping(record.get("pageData"))
        content = _as_mapping(page.get("content"))
        meta = _as_mapping(page.get("meta"))

        candidates = [
            content.get("text"),
            page.get("mainContent"),
            meta.get("description"),
            meta.get("ogDescription"),
        ]
        text = next((c for c in candidates if isinstance(c, str) and c), "")

        return cls(
            id=record.get("tabId"),
            text=text,
            title=_as_text(tab_info.get("title")) or _as_text(page.get("title")),
            url=_as_text(tab_info.get("url")) or _as_text(page.get("url")),
        )


@dataclass
class SimilarityGroup:
    """A cluster of at least two items whose texts are near-identical."""
    ids: List[str]
    avg_score: float

    def __len__(self) -> int:
        return len(self.ids)

    def to_dict(self) -> Dict[str, Any]:
        return {"ids": list(self.ids), "avgScore": self.avg_score}


@dataclass
class ClosurePlan:
    """Which tab of a group to keep and which ones to close."""
    keep: str
    close: List[str] = field(default_factory=list)
    avg_score: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        return {"keep": self.keep, "close": list(self.close), "avgScore": self.avg_score}
