import json
import os

import pytest

import tabdedup.config


# NATO words give texts with exactly known overlaps
WORDS = ["alpha", "bravo", "charlie", "delta", "echo", "foxtrot",
         "golf", "hotel", "india", "juliet", "kilo", "lima"]


def join_words(*indices):
    """Space-joined NATO words at the given indices."""
    return " ".join(WORDS[i] for i in indices)


@pytest.fixture
def words():
    return join_words


@pytest.fixture(autouse=True)
def isolated_config(monkeypatch, tmp_path):
    """Keep tests away from the real user config and environment."""
    monkeypatch.setattr(tabdedup.config, "USER_CONFIG_PATH", tmp_path / "user" / "config.toml")
    monkeypatch.chdir(tmp_path)
    for key in list(os.environ):
        if key.startswith("TABDEDUP_"):
            monkeypatch.delenv(key)
    monkeypatch.setenv("TABDEDUP_NO_PROGRESS", "1")
    monkeypatch.setattr(tabdedup.config, "_config", None)
    yield


@pytest.fixture
def sample_items():
    """Two near-identical tabs and one unrelated tab."""
    return [
        {"id": "1", "text": "The quick brown fox"},
        {"id": "2", "text": "The quick brown fox jumps"},
        {"id": "3", "text": "Completely unrelated content about cooking"},
    ]


@pytest.fixture
def chain_items(words):
    """A~B and B~C at 0.816, A~C at 0.5."""
    return [
        {"id": "A", "text": words(*range(0, 8))},
        {"id": "B", "text": words(*range(0, 12))},
        {"id": "C", "text": words(*range(4, 12))},
    ]


@pytest.fixture
def sample_snapshots():
    """Tab snapshots as exported by the browser extension."""
    return [
        {
            "tabId": 101,
            "tabInfo": {"title": "Python Documentation", "url": "https://docs.python.org/3/"},
            "pageData": {
                "title": "Python Documentation",
                "url": "https://docs.python.org/3/",
                "content": {"text": "Python 3 documentation. Welcome! This is the official documentation for Python."},
                "meta": {"description": "Official Python docs"},
            },
        },
        {
            "tabId": 102,
            "tabInfo": {"title": "Python Documentation", "url": "https://docs.python.org/3/index.html"},
            "pageData": {
                "content": {"text": "Python 3 documentation - Welcome! This is the official documentation for Python"},
            },
        },
        {
            "tabId": 103,
            "tabInfo": {"title": "GitHub", "url": "https://github.com"},
            "pageData": {
                "content": {"text": ""},
                "meta": {"description": "Where the world builds software"},
            },
        },
        {
            "tabId": 104,
            "tabInfo": {"title": "Extensions", "url": "chrome://extensions/"},
            "pageData": {},
        },
    ]


@pytest.fixture
def tabs_file(tmp_path, sample_snapshots):
    path = tmp_path / "tabs.json"
    path.write_text(json.dumps(sample_snapshots), encoding="utf-8")
    return path
