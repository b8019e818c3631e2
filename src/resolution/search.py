"""Ordering and keyword ranking of resolved dependencies."""

from typing import List, Sequence, Tuple

from constants import Constants

from .models import EffectiveDependency


def sort_by_weight(dependencies: Sequence[EffectiveDependency]) -> List[EffectiveDependency]:
    """Weight descending, then name ascending (case-insensitive), then id."""
    return sorted(dependencies, key=lambda dep: (-dep.weight, dep.name.lower(), dep.id))


def tokenize(text: str) -> List[str]:
    return [token for token in text.lower().split() if token]


def score(dependency: EffectiveDependency, tokens: Sequence[str]) -> int:
    """Relevance of ``dependency`` for ``tokens``; 0 unless every token matches somewhere."""
    identifiers = {dependency.id.lower()} | {alias.lower() for alias in dependency.aliases}
    keywords = [keyword.lower() for keyword in dependency.keywords]
    name = dependency.name.lower()
    description = (dependency.description or "").lower()

    total = 0
    for token in tokens:
        token_score = 0
        if token in identifiers:
            token_score += Constants.SEARCH_SCORE_ID
        elif any(token in identifier for identifier in identifiers):
            token_score += Constants.SEARCH_SCORE_NAME
        if any(token in keyword for keyword in keywords):
            token_score += Constants.SEARCH_SCORE_KEYWORD
        if token in name:
            token_score += Constants.SEARCH_SCORE_NAME
        if token in description:
            token_score += Constants.SEARCH_SCORE_DESCRIPTION
        if token_score == 0:
            return 0
        total += token_score
    return total


def rank_by_keyword(dependencies: Sequence[EffectiveDependency], text: str) -> List[EffectiveDependency]:
    """Dependencies matching every token of ``text``, best score first.

    Ties fall back to weight descending then name ascending.
    """
    tokens = tokenize(text)
    scored: List[Tuple[int, EffectiveDependency]] = []
    for dependency in dependencies:
        value = score(dependency, tokens)
        if value > 0:
            scored.append((value, dependency))
    scored.sort(key=lambda item: (-item[0], -item[1].weight, item[1].name.lower(), item[1].id))
    return [dependency for _, dependency in scored]
