"""Shared fixtures for catalog engine tests."""

from __future__ import annotations

import shutil
from pathlib import Path
from typing import Callable
from xml.sax.saxutils import escape

import pytest

from transcat.parser import parse_file
from transcat.protocols import Catalog
from transcat.store import CatalogStore


FIXTURES = Path(__file__).parent / "fixtures"


def _message(
    source: str,
    translation: str | None = None,
    *,
    comment: str | None = None,
    type: str | None = None,
    extracomment: str | None = None,
) -> str:
    parts = ["<message>", f"<source>{escape(source)}</source>"]
    if comment is not None:
        parts.append(f"<comment>{escape(comment)}</comment>")
    if extracomment is not None:
        parts.append(f"<extracomment>{escape(extracomment)}</extracomment>")
    if translation is not None or type is not None:
        type_attr = f' type="{type}"' if type else ""
        parts.append(f"<translation{type_attr}>{escape(translation or '')}</translation>")
    parts.append("</message>")
    return "".join(parts)


def _context(name: str, *messages: str) -> str:
    return f"<context><name>{escape(name)}</name>{''.join(messages)}</context>"


def _document(*contexts: str, language: str | None = "vi", version: str | None = "2.1") -> str:
    attrs = ""
    if version is not None:
        attrs += f' version="{version}"'
    if language is not None:
        attrs += f' language="{language}"'
    return (
        '<?xml version="1.0" encoding="utf-8"?>\n<!DOCTYPE TS>\n'
        f"<TS{attrs}>\n{''.join(contexts)}\n</TS>\n"
    )


class TSBuilder:
    """Builds small catalog documents for tests."""

    message = staticmethod(_message)
    context = staticmethod(_context)
    document = staticmethod(_document)


@pytest.fixture
def ts() -> type[TSBuilder]:
    """Catalog document builder."""
    return TSBuilder


@pytest.fixture
def fixtures_dir() -> Path:
    return FIXTURES


@pytest.fixture
def vi_catalog() -> Catalog:
    """The Vietnamese sample catalog."""
    return parse_file(FIXTURES / "app_vi.ts")


@pytest.fixture
def catalog_dir(tmp_path: Path) -> Path:
    """Directory holding the valid vi and vi_VN sample catalogs."""
    for name in ("app_vi.ts", "app_vi_VN.ts"):
        shutil.copy(FIXTURES / name, tmp_path / name)
    return tmp_path


@pytest.fixture
def store() -> CatalogStore:
    """Store with the vi and vi_VN samples loaded and vi_VN active."""
    store = CatalogStore()
    for name in ("app_vi.ts", "app_vi_VN.ts"):
        result = store.load_catalog(FIXTURES / name)
        assert result.ok, result.error
    store.set_active_locale("vi_VN")
    yield store
    store.close()


@pytest.fixture
def make_store(ts) -> Callable[..., CatalogStore]:
    """Build a store from documents and activate a locale."""

    def factory(*documents: str, locale: str = "vi") -> CatalogStore:
        store = CatalogStore()
        for document in documents:
            result = store.load_catalog(document)
            assert result.ok, result.error
        store.set_active_locale(locale)
        return store

    return factory
