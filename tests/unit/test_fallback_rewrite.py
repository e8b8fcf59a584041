"""Tests for the templated FallbackRewriter"""

import pytest

from whchecker.analysis.models import Dimension, MissingItem, PhraseCategory, RuleMatch
from whchecker.analysis.rewrite import FallbackRewriter

EXAMPLE = "例）明日17時までに見積書を作成し、Google Driveにアップロードして共有してください。"


@pytest.fixture
def rewriter(catalog):
    return FallbackRewriter(catalog)


def _missing(*keys: str) -> list[MissingItem]:
    return [MissingItem(key=Dimension(key), reason="r") for key in keys]


def _match(phrase: str, category: PhraseCategory) -> RuleMatch:
    return RuleMatch(phrase=phrase, category=category, reason="r")


def test_rewrite_appends_clauses_then_example(rewriter, catalog):
    clauses = catalog.rewrite.clauses
    rewrite = rewriter.build_rewrite("  明日までに資料を送ってください \n", _missing("who", "why"))

    assert rewrite == "\n".join(
        [
            "明日までに資料を送ってください",
            f"- {clauses[Dimension.WHO]}",
            f"- {clauses[Dimension.WHY]}",
            EXAMPLE,
        ]
    )


def test_clauses_follow_dimension_order_not_input_order(rewriter):
    rewrite = rewriter.build_rewrite("資料", _missing("how", "who"))
    lines = rewrite.splitlines()
    assert lines[1].startswith("- 誰が行うか")
    assert lines[2].startswith("- どのように")


def test_no_missing_means_no_example(rewriter):
    assert rewriter.build_rewrite(" 別に ", []) == "別に"


def test_rationale_hints(rewriter):
    matches = [
        _match("あとで話そう", PhraseCategory.AMBIGUOUS),
        _match("別に", PhraseCategory.AMBIGUOUS),
        _match("前も言ったよね", PhraseCategory.NEGATIVE),
    ]
    rationale = rewriter.build_rationale(_missing("who", "when"), matches)
    assert rationale == [
        "不足: WHO・WHEN",
        "曖昧: 「あとで話そう」、「別に」",
        "否定: 「前も言ったよね」",
    ]


def test_rationale_omits_empty_sections(rewriter):
    matches = [_match("どうせ無理でしょ", PhraseCategory.NEGATIVE)]
    assert rewriter.build_rationale([], matches) == ["否定: 「どうせ無理でしょ」"]


def test_suggest_sets_improved_points(rewriter):
    suggestion = rewriter.suggest("資料", _missing("who", "where"), [])
    assert suggestion.improved_points == [Dimension.WHO, Dimension.WHERE]
    assert suggestion.rewrite.endswith(EXAMPLE)


def test_suggest_for_phrase_only_findings(rewriter):
    suggestion = rewriter.suggest("別に", [], [_match("別に", PhraseCategory.AMBIGUOUS)])
    assert suggestion.rewrite == "別に"
    assert suggestion.improved_points == []
    assert suggestion.rationale == ["曖昧: 「別に」"]


def test_suggest_without_findings_is_none(rewriter):
    assert rewriter.suggest("ありがとうございます", [], []) is None


def test_fallback_is_byte_identical_across_calls(rewriter):
    args = ("明日までに資料を送ってください", _missing("who", "where", "why", "how"), [])
    first = rewriter.suggest(*args)
    second = FallbackRewriter().suggest(*args)
    assert first == second
    assert first.rewrite.encode("utf-8") == second.rewrite.encode("utf-8")
