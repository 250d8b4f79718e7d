"""
Loading tabs to compare.

Two record shapes are accepted:

* ``item``: a flat ``{"id", "text", "title"?, "url"?}`` object
* ``snapshot``: a tab as exported by the browser extension,
  ``{"tabId", "tabInfo": {...}, "pageData": {...}}``

Saved HTML pages can also be loaded directly; their text is extracted the
same way the extension's page script does it.
"""
import json
import logging
import re
from enum import Enum
from pathlib import Path
from typing import Any, Iterable, List, Mapping, Optional, Union

from bs4 import BeautifulSoup

from tabdedup.constants import (
    INTERNAL_URL_PREFIXES,
    MAX_MAIN_CONTENT_LENGTH,
    MAX_PAGE_TEXT_LENGTH,
    MAX_PARAGRAPHS,
)
from tabdedup.models import InputItem
from tabdedup.progress import with_progress

logger = logging.getLogger(__name__)


class TabRecordError(ValueError):
    """A tab record (or tabs file) could not be understood."""

    def __init__(self, message: str, index: Optional[int] = None):
        self.index = index
        if index is not None:
            message = f"record {index}: {message}"
        super().__init__(message)


class RecordShape(Enum):
    ITEM = "item"
    SNAPSHOT = "snapshot"


_CONSTRUCTORS = {
    RecordShape.ITEM: InputItem.from_item,
    RecordShape.SNAPSHOT: InputItem.from_snapshot,
}


def record_shape(record: Any, index: Optional[int] = None) -> RecordShape:
    """
    Tell which shape a record has.

    Raises:
        TabRecordError: Not a mapping, or neither shape matches
    """
    if not isinstance(record, Mapping):
        raise TabRecordError(f"expected an object, got {type(record).__name__}", index)
    if "tabId" in record and ("pageData" in record or "tabInfo" in record):
        return RecordShape.SNAPSHOT
    if "id" in record or "tabId" in record:
        return RecordShape.ITEM
    raise TabRecordError("record has neither 'id' nor 'tabId'", index)


def is_extractable_url(url: Optional[str]) -> bool:
    """Internal browser pages have no readable content."""
    if not url:
        return True
    return not url.lower().startswith(INTERNAL_URL_PREFIXES)


@with_progress("Reading tabs")
def items_from_records(records: Iterable[Any], skip_internal: bool = True) -> List[InputItem]:
    """
    Convert raw records into InputItems.

    Args:
        records: Records in either accepted shape, or InputItems (may be mixed)
        skip_internal: Drop chrome://, about: and similar pages

    Returns:
        Items in record order
    """
    items = []
    for index, record in enumerate(records):
        if isinstance(record, InputItem):
            item = record
        else:
            item = _CONSTRUCTORS[record_shape(record, index)](record)
        if skip_internal and not is_extractable_url(item.url):
            logger.info(f"Skipping internal page {item.url} (tab {item.id})")
            continue
        items.append(item)
    return items


def load_tabs(path: Union[str, Path], skip_internal: bool = True) -> List[InputItem]:
    """
    Read tabs from a JSON file.

    The file holds either a list of records or an object with a ``tabs``
    list.

    Raises:
        TabRecordError: Invalid JSON or unexpected structure
    """
    path = Path(path)
    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise TabRecordError(f"{path}: invalid JSON ({e})") from e

    if isinstance(data, Mapping):
        data = data.get("tabs")
    if not isinstance(data, list):
        raise TabRecordError(f"{path}: expected a list of tabs")

    items = items_from_records(data, skip_internal=skip_internal)
    logger.debug(f"Loaded {len(items)} tabs from {path}")
    return items


def _collapse(text: str) -> str:
    return re.sub(r'\s+', ' ', text).strip()


def extract_page_text(html: str) -> dict:
    """
    Pull comparable text out of an HTML page.

    Mirrors what the extension reads from a live tab: the title, all
    headings, the first paragraphs and the start of the main content.

    Returns:
        Dictionary with 'title', 'text' and 'description'
    """
    soup = BeautifulSoup(html or '', 'html.parser')

    title = soup.title.get_text(strip=True) if soup.title else ''
    headings = [h.get_text(strip=True) for h in soup.find_all(['h1', 'h2', 'h3', 'h4', 'h5', 'h6'])]
    paragraphs = [p.get_text(strip=True) for p in soup.find_all('p')]
    main = soup.select_one('main, article, .content, .main-content, .post-content')
    main_text = main.get_text(' ', strip=True) if main else ''

    description = ''
    meta = soup.find('meta', attrs={'name': 'description'})
    if meta and meta.get('content'):
        description = meta['content']

    parts = [title] + headings + paragraphs[:MAX_PARAGRAPHS] + [main_text[:MAX_MAIN_CONTENT_LENGTH]]
    text = _collapse(' '.join(p for p in parts if p))[:MAX_PAGE_TEXT_LENGTH]

    return {'title': title, 'text': text or description, 'description': description}


def load_html_pages(paths: Iterable[Union[str, Path]]) -> List[InputItem]:
    """One InputItem per saved HTML page; the id is the file path."""
    items = []
    for path in paths:
        path = Path(path)
        try:
            html = path.read_text(encoding='utf-8', errors='replace')
        except OSError as e:
            logger.warning(f"Could not read {path}: {e}")
            continue
        page = extract_page_text(html)
        items.append(InputItem(id=str(path), text=page['text'], title=page['title'],
                               url=path.resolve().as_uri()))
    return items
