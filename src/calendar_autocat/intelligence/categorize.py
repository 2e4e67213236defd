from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Literal, Mapping, Optional

from structlog import get_logger

from .utils import has_phrase, normalize_text, tokens

log = get_logger()

MatchMode = Literal["word", "substring"]


@dataclass(frozen=True)
class KeywordRule:
    category: str
    keywords: tuple[str, ...]


@dataclass(frozen=True)
class KeywordTable:
    """Ordered category -> keywords table. Earlier rules win."""
    rules: tuple[KeywordRule, ...]

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Iterable[str]]) -> "KeywordTable":
        rules = []
        for category, keywords in mapping.items():
            kws = tuple(dict.fromkeys(normalize_text(k) for k in keywords if normalize_text(k)))
            rules.append(KeywordRule(category=category, keywords=kws))
        return cls(rules=tuple(rules))

    @property
    def categories(self) -> list[str]:
        return [r.category for r in self.rules]


class Classifier:
    def __init__(self, table: KeywordTable, mode: MatchMode = "word") -> None:
        if mode not in ("word", "substring"):
            raise ValueError(f"unknown match mode: {mode!r}")
        self.table = table
        self.mode = mode

    def _matches(self, keyword: str, title: str, toks: set[str]) -> bool:
        if self.mode == "substring":
            return keyword in title
        return keyword in toks or has_phrase(title, keyword) or title == keyword

    def classify(self, title: Optional[str]) -> Optional[str]:
        t = normalize_text(title)
        if not t:
            return None
        toks = set(tokens(t))
        for rule in self.table.rules:
            for kw in rule.keywords:
                if self._matches(kw, t, toks):
                    log.debug("classify_match", title=title, category=rule.category, keyword=kw)
                    return rule.category
        log.debug("classify_no_match", title=title)
        return None
