"""Tests for locale identifiers and the locale manager."""

from __future__ import annotations

import pytest

from transcat.index import CatalogIndex
from transcat.manager import ChainLink, LocaleManager
from transcat.parser import parse_catalog
from transcat.protocols import LocaleIdentifier, LookupKey


class TestLocaleIdentifier:
    """Test locale tag normalization."""

    @pytest.mark.parametrize(
        "tag,expected",
        [
            ("vi", "vi"),
            ("vi_VN", "vi_VN"),
            ("vi-vn", "vi_VN"),
            ("VI_vn.UTF-8", "vi_VN"),
            ("sr_Latn_RS", "sr_RS"),
            ("es_419", "es_419"),
            ("de_DE@euro", "de_DE"),
        ],
    )
    def test_parse(self, tag, expected):
        assert LocaleIdentifier.parse(tag).tag == expected

    def test_invalid_tag(self):
        with pytest.raises(ValueError):
            LocaleIdentifier.parse("")

    def test_fallback_chain(self):
        chain = LocaleIdentifier.parse("vi_VN").fallback_chain()
        assert [loc.tag for loc in chain] == ["vi_VN", "vi"]

    def test_parse_is_idempotent(self):
        locale = LocaleIdentifier.parse("vi_VN")
        assert LocaleIdentifier.parse(locale) is locale


def _index(ts, locale, *messages):
    return CatalogIndex.build(parse_catalog(ts.document(ts.context("W", *messages), language=locale)), locale=locale)


@pytest.fixture
def indexes(ts) -> dict[str, CatalogIndex]:
    return {
        "vi_VN": _index(
            ts,
            "vi_VN",
            ts.message("Download completed", "Tải xong (nháp)", type="unfinished"),
            ts.message("Seeding", "Đang seed"),
            ts.message("Paused", "", type="unfinished"),
        ),
        "vi": _index(
            ts,
            "vi",
            ts.message("Download completed", "Tải về hoàn tất"),
            ts.message("Seeding", "Đang chia sẻ"),
            ts.message("Stalled", "", type="unfinished"),
            ts.message("Blank", ""),
        ),
        "en": _index(ts, "en", ts.message("Stalled", "Stalled (en)")),
    }


@pytest.fixture
def manager(indexes) -> LocaleManager:
    manager = LocaleManager(provider=lambda loc: indexes.get(loc.tag))
    manager.set_active_locale("vi_VN")
    return manager


class TestLocaleManager:
    """Test chain construction and resolution."""

    def test_chain(self, manager):
        assert manager.chain == ("vi_VN", "vi")
        assert manager.active_locale == LocaleIdentifier("vi", "VN")

    def test_links_expose_chain_indexes(self, manager, indexes):
        assert [link.locale for link in manager.links] == ["vi_VN", "vi"]
        assert manager.links[0].index is indexes["vi_VN"]
        assert manager.links[1].index is indexes["vi"]

    def test_chain_with_fallback_locales(self, indexes):
        manager = LocaleManager(provider=lambda loc: indexes.get(loc.tag), fallback_locales=["en_US"])
        assert [loc.tag for loc in manager.chain_for("vi_VN")] == ["vi_VN", "vi", "en_US", "en"]
        assert manager.set_active_locale("vi_VN") == ("vi_VN", "vi", "en")

    def test_links_without_catalogs_skipped(self, indexes):
        manager = LocaleManager(provider=lambda loc: indexes.get(loc.tag))
        assert manager.set_active_locale("de_DE") == ()

    def test_most_specific_translation_wins(self, manager):
        entry = manager.resolve(LookupKey.of("W", "Seeding"))
        assert entry.translation == "Đang seed"

    def test_unfinished_skip_through(self, manager):
        entry = manager.resolve(LookupKey.of("W", "Download completed"))
        assert entry.translation == "Tải về hoàn tất"

    def test_unfinished_everywhere_is_none(self, manager):
        assert manager.resolve(LookupKey.of("W", "Paused")) is None
        assert manager.resolve(LookupKey.of("W", "Stalled")) is None

    def test_lookup_reports_locale(self, manager):
        match = manager.lookup(LookupKey.of("W", "Download completed"))
        assert match.locale == "vi"

    def test_empty_translated_entry_is_usable(self, manager):
        assert manager.resolve(LookupKey.of("W", "Blank")).translation == ""

    def test_empty_translation_as_unfinished_option(self, indexes):
        manager = LocaleManager(
            provider=lambda loc: indexes.get(loc.tag),
            empty_translation_is_unfinished=True,
        )
        manager.set_active_locale("vi")
        assert manager.resolve(LookupKey.of("W", "Blank")) is None

    def test_indexes_reused_across_switches(self, indexes):
        calls = []

        def provider(locale):
            calls.append(locale.tag)
            return indexes.get(locale.tag)

        manager = LocaleManager(provider=provider)
        manager.set_active_locale("vi_VN")
        manager.set_active_locale("vi")
        manager.set_active_locale("vi_VN")
        assert calls == ["vi_VN", "vi"]

    def test_switch_replaces_chain(self, manager):
        manager.set_active_locale("en")
        assert manager.chain == ("en",)
        assert manager.resolve(LookupKey.of("W", "Seeding")) is None

    def test_without_provider(self):
        manager = LocaleManager()
        assert manager.set_active_locale("vi") == ()
        assert manager.resolve(LookupKey.of("W", "Seeding")) is None

    def test_from_links(self, indexes):
        manager = LocaleManager.from_links("vi", [ChainLink("vi", indexes["vi"])])
        assert manager.chain == ("vi",)
        assert manager.resolve(LookupKey.of("W", "Seeding")).translation == "Đang chia sẻ"
