"""
Rule catalog: the static data the analysis pipeline runs on.

Presence patterns, phrase catalogs, escalation markers and rewrite templates
live in a YAML file (catalogs/ja_business.yaml by default). This module loads
that file once into frozen dataclasses with pre-compiled regexes, so the
detection code never branches on literal keywords and catalogs can be
extended without touching it.

Key: get_catalog() returns the process-wide default; load_catalog(path)
builds an independent instance (used by tests and alternate deployments).
"""

from __future__ import annotations

import os
import re
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml

from whchecker.analysis.models import DIMENSION_ORDER, Dimension, PhraseCategory
from whchecker.observability.logging import get_logger

logger = get_logger(__name__)

DEFAULT_CATALOG_PATH = Path(__file__).parent / "catalogs" / "ja_business.yaml"


class CatalogError(ValueError):
    """Raised when a rule catalog is missing or malformed."""


@dataclass(frozen=True)
class PresenceRule:
    key: Dimension
    reason: str
    patterns: tuple[re.Pattern, ...]

    def present_in(self, text: str) -> bool:
        return any(pattern.search(text) for pattern in self.patterns)


@dataclass(frozen=True)
class PhraseEntry:
    phrase: str
    category: PhraseCategory
    reason: str


@dataclass(frozen=True)
class CasualIndicators:
    emoji: tuple[re.Pattern, ...]
    kaomoji: tuple[re.Pattern, ...]
    exclamations: tuple[re.Pattern, ...]
    laugh_suffix: tuple[re.Pattern, ...]

    def groups(self) -> tuple[tuple[re.Pattern, ...], ...]:
        return (self.emoji, self.kaomoji, self.exclamations, self.laugh_suffix)


@dataclass(frozen=True)
class EscalationRules:
    casual_openers: tuple[str, ...]
    casual_opener_patterns: tuple[re.Pattern, ...]
    request_markers: tuple[re.Pattern, ...]
    question_marks: tuple[re.Pattern, ...]
    deadline_markers: tuple[re.Pattern, ...]
    mention_markers: tuple[re.Pattern, ...]
    casual_indicators: CasualIndicators
    reasons: dict[str, str]

    def starts_casual(self, text: str) -> bool:
        """True if the trimmed text opens with a scorer casual opener."""
        stripped = text.strip()
        if stripped.startswith(self.casual_openers):
            return True
        return any(pattern.match(stripped) for pattern in self.casual_opener_patterns)


@dataclass(frozen=True)
class RewriteTemplates:
    clauses: dict[Dimension, str]
    example: str
    rationale_labels: dict[str, str]


@dataclass(frozen=True)
class Catalog:
    source: str
    presence: tuple[PresenceRule, ...]
    casual_openers: tuple[str, ...]
    phrases: tuple[PhraseEntry, ...]
    escalation: EscalationRules
    rewrite: RewriteTemplates

    def starts_casual(self, text: str) -> bool:
        """True if the trimmed text opens with a detector casual opener."""
        return text.strip().startswith(self.casual_openers)


def _compile_all(patterns: Any, where: str) -> tuple[re.Pattern, ...]:
    if not isinstance(patterns, list) or not patterns:
        raise CatalogError(f"{where}: expected a non-empty list of patterns")
    try:
        return tuple(re.compile(str(pattern)) for pattern in patterns)
    except re.error as exc:
        raise CatalogError(f"{where}: invalid pattern: {exc}") from exc


def _require(data: dict, key: str, where: str) -> Any:
    if key not in data or data[key] in (None, "", [], {}):
        raise CatalogError(f"{where}: missing '{key}'")
    return data[key]


def _parse_presence(data: dict) -> tuple[PresenceRule, ...]:
    section = _require(data, "presence", "catalog")
    rules = []
    for key in DIMENSION_ORDER:
        entry = _require(section, key.value, "presence")
        rules.append(
            PresenceRule(
                key=key,
                reason=str(_require(entry, "reason", f"presence.{key.value}")),
                patterns=_compile_all(entry.get("patterns"), f"presence.{key.value}.patterns"),
            )
        )
    return tuple(rules)


def _parse_phrases(data: dict) -> tuple[PhraseEntry, ...]:
    section = _require(data, "phrases", "catalog")
    entries = []
    # Ambiguous before negative regardless of YAML key order
    for category in (PhraseCategory.AMBIGUOUS, PhraseCategory.NEGATIVE):
        for raw in section.get(category.value) or []:
            entries.append(
                PhraseEntry(
                    phrase=str(_require(raw, "phrase", f"phrases.{category.value}")),
                    category=category,
                    reason=str(raw.get("reason", "")),
                )
            )
    return tuple(entries)


def _parse_escalation(data: dict, casual_openers: tuple[str, ...]) -> EscalationRules:
    section = _require(data, "escalation", "catalog")
    indicators = _require(section, "casual_indicators", "escalation")
    extra = tuple(str(opener) for opener in section.get("extra_casual_openers") or [])
    return EscalationRules(
        casual_openers=casual_openers + tuple(o for o in extra if o not in casual_openers),
        casual_opener_patterns=(
            _compile_all(section["casual_opener_patterns"], "escalation.casual_opener_patterns")
            if section.get("casual_opener_patterns")
            else ()
        ),
        request_markers=_compile_all(section.get("request_markers"), "escalation.request_markers"),
        question_marks=_compile_all(section.get("question_marks"), "escalation.question_marks"),
        deadline_markers=_compile_all(
            section.get("deadline_markers"), "escalation.deadline_markers"
        ),
        mention_markers=_compile_all(section.get("mention_markers"), "escalation.mention_markers"),
        casual_indicators=CasualIndicators(
            emoji=_compile_all(indicators.get("emoji"), "casual_indicators.emoji"),
            kaomoji=_compile_all(indicators.get("kaomoji"), "casual_indicators.kaomoji"),
            exclamations=_compile_all(
                indicators.get("exclamations"), "casual_indicators.exclamations"
            ),
            laugh_suffix=_compile_all(
                indicators.get("laugh_suffix"), "casual_indicators.laugh_suffix"
            ),
        ),
        reasons={str(k): str(v) for k, v in (section.get("reasons") or {}).items()},
    )


def _parse_rewrite(data: dict) -> RewriteTemplates:
    section = _require(data, "rewrite", "catalog")
    clauses = _require(section, "clauses", "rewrite")
    return RewriteTemplates(
        clauses={
            key: str(_require(clauses, key.value, "rewrite.clauses")) for key in DIMENSION_ORDER
        },
        example=str(_require(section, "example", "rewrite")),
        rationale_labels={
            str(k): str(v) for k, v in (section.get("rationale_labels") or {}).items()
        },
    )


def _resolve_path(path: Path | str | None) -> Path:
    if path is not None:
        return Path(path)
    override = os.getenv("WHCHECKER_CATALOG_PATH")
    if override:
        return Path(override)
    return DEFAULT_CATALOG_PATH


def parse_catalog(data: dict, source: str = "<memory>") -> Catalog:
    """Build a Catalog from an already-parsed YAML mapping."""
    if not isinstance(data, dict):
        raise CatalogError(f"{source}: catalog root must be a mapping")

    casual_openers = tuple(str(opener) for opener in data.get("casual_openers") or [])
    return Catalog(
        source=source,
        presence=_parse_presence(data),
        casual_openers=casual_openers,
        phrases=_parse_phrases(data),
        escalation=_parse_escalation(data, casual_openers),
        rewrite=_parse_rewrite(data),
    )


def load_catalog(path: Path | str | None = None) -> Catalog:
    """
    Load and compile a rule catalog.

    Side Effects:
        - Reads the YAML file from disk

    Raises:
        CatalogError: If the file is missing, unparsable or incomplete
    """
    catalog_path = _resolve_path(path)
    if not catalog_path.exists():
        raise CatalogError(f"Rule catalog not found: {catalog_path}")

    try:
        data = yaml.safe_load(catalog_path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        raise CatalogError(f"Failed to parse rule catalog {catalog_path}: {exc}") from exc

    catalog = parse_catalog(data, source=str(catalog_path))
    logger.info(
        "Loaded rule catalog from %s (presence=%d, phrases=%d, casual_openers=%d)",
        catalog_path,
        len(catalog.presence),
        len(catalog.phrases),
        len(catalog.casual_openers),
    )
    return catalog


@lru_cache(maxsize=1)
def get_catalog() -> Catalog:
    """Process-wide default catalog, loaded on first use."""
    return load_catalog()


__all__ = [
    "DEFAULT_CATALOG_PATH",
    "Catalog",
    "CatalogError",
    "PhraseEntry",
    "PresenceRule",
    "get_catalog",
    "load_catalog",
    "parse_catalog",
]
