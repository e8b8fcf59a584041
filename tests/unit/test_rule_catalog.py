"""Tests for YAML rule catalog loading"""

import copy

import pytest
import yaml

from whchecker.analysis.catalog import (
    DEFAULT_CATALOG_PATH,
    CatalogError,
    get_catalog,
    load_catalog,
    parse_catalog,
)
from whchecker.analysis.models import DIMENSION_ORDER, PhraseCategory
from whchecker.analysis.phrases import PhraseMatcher
from whchecker.analysis.presence import PresenceDetector


@pytest.fixture
def raw_catalog():
    return yaml.safe_load(DEFAULT_CATALOG_PATH.read_text(encoding="utf-8"))


def _write(tmp_path, data) -> str:
    path = tmp_path / "catalog.yaml"
    path.write_text(yaml.safe_dump(data, allow_unicode=True), encoding="utf-8")
    return str(path)


class TestPackagedCatalog:
    def test_presence_rules_cover_every_dimension_in_order(self):
        catalog = get_catalog()
        assert tuple(rule.key for rule in catalog.presence) == DIMENSION_ORDER

    def test_phrase_catalogs(self):
        catalog = get_catalog()
        categories = [entry.category for entry in catalog.phrases]
        assert categories.count(PhraseCategory.AMBIGUOUS) == 6
        assert categories.count(PhraseCategory.NEGATIVE) == 5
        assert categories == sorted(categories, key=list(PhraseCategory).index)

    def test_rewrite_clause_for_every_dimension(self):
        assert set(get_catalog().rewrite.clauses) == set(DIMENSION_ORDER)

    def test_default_catalog_is_cached(self):
        assert get_catalog() is get_catalog()


class TestCustomCatalog:
    def test_added_phrase_is_matched_without_code_changes(self, tmp_path, raw_catalog):
        raw_catalog["phrases"]["ambiguous"].append({"phrase": "善処します", "reason": "実行するか不明"})
        catalog = load_catalog(_write(tmp_path, raw_catalog))

        matches = PhraseMatcher(catalog).match("善処します")
        assert [(m.phrase, m.reason) for m in matches] == [("善処します", "実行するか不明")]

    def test_added_presence_pattern(self, tmp_path, raw_catalog):
        raw_catalog["presence"]["where"]["patterns"].append("Webex")
        catalog = load_catalog(_write(tmp_path, raw_catalog))

        keys = [item.key.value for item in PresenceDetector(catalog).detect("Webexで")]
        assert "where" not in keys

    def test_env_override(self, tmp_path, raw_catalog, monkeypatch):
        path = _write(tmp_path, raw_catalog)
        monkeypatch.setenv("WHCHECKER_CATALOG_PATH", path)
        assert load_catalog().source == path

    def test_explicit_path_wins_over_env(self, tmp_path, monkeypatch):
        monkeypatch.setenv("WHCHECKER_CATALOG_PATH", str(tmp_path / "nope.yaml"))
        assert load_catalog(DEFAULT_CATALOG_PATH).source == str(DEFAULT_CATALOG_PATH)


class TestCatalogErrors:
    def test_missing_file(self, tmp_path):
        with pytest.raises(CatalogError, match="not found"):
            load_catalog(tmp_path / "missing.yaml")

    def test_unparsable_yaml(self, tmp_path):
        path = tmp_path / "broken.yaml"
        path.write_text("presence: [unclosed", encoding="utf-8")
        with pytest.raises(CatalogError, match="Failed to parse"):
            load_catalog(path)

    def test_root_must_be_mapping(self):
        with pytest.raises(CatalogError):
            parse_catalog(["not", "a", "mapping"])

    @pytest.mark.parametrize("section", ["presence", "phrases", "escalation", "rewrite"])
    def test_missing_section(self, raw_catalog, section):
        data = copy.deepcopy(raw_catalog)
        del data[section]
        with pytest.raises(CatalogError, match=section):
            parse_catalog(data)

    def test_missing_dimension(self, raw_catalog):
        del raw_catalog["presence"]["why"]
        with pytest.raises(CatalogError, match="why"):
            parse_catalog(raw_catalog)

    def test_invalid_regex(self, raw_catalog):
        raw_catalog["presence"]["who"]["patterns"] = ["(unclosed"]
        with pytest.raises(CatalogError, match="invalid pattern"):
            parse_catalog(raw_catalog)

    def test_empty_pattern_list(self, raw_catalog):
        raw_catalog["escalation"]["request_markers"] = []
        with pytest.raises(CatalogError, match="request_markers"):
            parse_catalog(raw_catalog)
