"""Ranked keyword search over the catalog.

The index keeps a lowercase, denormalised copy of every record so queries do
no per-call case folding of catalog text.  Scoring is a fixed-weight
heuristic: alias hits outrank name hits, which outrank use-case,
description, kind and prop hits in that order.
"""

from __future__ import annotations

from dataclasses import dataclass

from .models import ComponentRecord
from .store import CatalogStore

EXACT_MATCH_SCORE = 100

NAME_WEIGHT = 10
NAME_EXACT_BONUS = 5
KIND_WEIGHT = 3
DESCRIPTION_WEIGHT = 5
USE_CASE_WEIGHT = 7
ALIAS_WEIGHT = 8
ALIAS_EXACT_BONUS = 5
PROP_WEIGHT = 2


@dataclass(frozen=True)
class SearchIndexEntry:
    """Lowercase view of one record, built once."""

    record: ComponentRecord
    name: str
    kind: str
    description: str
    use_cases: tuple[str, ...]
    aliases: tuple[str, ...]
    prop_names: tuple[str, ...]

    @classmethod
    def from_record(cls, record: ComponentRecord) -> "SearchIndexEntry":
        return cls(
            record=record,
            name=record.name.lower(),
            kind=record.kind.lower(),
            description=record.description.lower(),
            use_cases=tuple(u.lower() for u in record.use_cases),
            aliases=tuple(a.lower() for a in record.aliases),
            prop_names=tuple(p.lower() for p in record.prop_names),
        )

    def score(self, terms: list[str], query: str) -> int:
        """Sum of weighted hits of *terms*; *query* is the full lowercased query."""
        total = 0
        for term in terms:
            if term in self.name:
                total += NAME_WEIGHT
                if term == self.name:
                    total += NAME_EXACT_BONUS
            if term in self.kind:
                total += KIND_WEIGHT
            if term in self.description:
                total += DESCRIPTION_WEIGHT
            total += USE_CASE_WEIGHT * sum(1 for uc in self.use_cases if term in uc)
            for alias in self.aliases:
                if term in alias:
                    total += ALIAS_WEIGHT
                    if alias == query:
                        total += ALIAS_EXACT_BONUS
            total += PROP_WEIGHT * sum(1 for prop in self.prop_names if term in prop)
        return total


@dataclass(frozen=True)
class SearchHit:
    record: ComponentRecord
    score: int


class SearchIndex:
    """Precomputed search view over a :class:`CatalogStore`."""

    def __init__(self, store: CatalogStore) -> None:
        self._entries: tuple[SearchIndexEntry, ...] = tuple(
            SearchIndexEntry.from_record(r) for r in store.list()
        )
        self._by_name: dict[str, SearchIndexEntry] = {}
        for entry in self._entries:
            self._by_name.setdefault(entry.name, entry)

    def __len__(self) -> int:
        return len(self._entries)

    def search(self, query: str) -> list[SearchHit]:
        """Rank catalog entries against *query*, best first.

        A query equal to a component name (any case) returns only that
        component with :data:`EXACT_MATCH_SCORE`.  Otherwise entries are
        scored per whitespace-separated term; zero scores are dropped and ties
        keep catalog order.
        """
        q = query.strip().lower()
        if not q:
            return []

        exact = self._by_name.get(q)
        if exact is not None:
            return [SearchHit(exact.record, EXACT_MATCH_SCORE)]

        terms = [t for t in q.split() if t]
        hits: list[SearchHit] = []
        for entry in self._entries:
            score = entry.score(terms, q)
            if score > 0:
                hits.append(SearchHit(entry.record, score))

        # sorted() is stable, so equal scores stay in catalog order
        return sorted(hits, key=lambda h: h.score, reverse=True)

    def suggest(self, query: str, limit: int) -> list[str]:
        """Names of the top *limit* matches for *query*."""
        if limit <= 0:
            return []
        return [hit.record.name for hit in self.search(query)[:limit]]
