"""
Text normalization: turn raw tab text into lowercase word tokens.
"""
import re
from typing import List, Optional

_MARKUP_RE = re.compile(r'<[^>]*>')
_NEWLINE_RE = re.compile(r'[\n\r]+')
_NON_WORD_RE = re.compile(r'[^a-zA-Z0-9\s]')
_WHITESPACE_RE = re.compile(r'\s+')


def clean_text(text: Optional[str]) -> str:
    """
    Strip markup and punctuation from text and lowercase it.

    Tags and punctuation are replaced by spaces rather than deleted, so
    ``"don't"`` becomes ``"don t"``. Only ASCII letters and digits survive.

    Args:
        text: Raw text, may be None

    Returns:
        Single-spaced lowercase string (possibly empty)
    """
    if not text:
        return ''

    text = _MARKUP_RE.sub(' ', str(text))
    text = _NEWLINE_RE.sub(' ', text)
    text = _NON_WORD_RE.sub(' ', text)
    text = _WHITESPACE_RE.sub(' ', text)
    return text.strip().lower()


def tokenize(text: Optional[str]) -> List[str]:
    """Split text into normalized word tokens, in order of appearance."""
    return [word for word in clean_text(text).split(' ') if word]
