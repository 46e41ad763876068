"""Weighted fuzzy matching for interactive selection.

The matcher walks the candidate string once, greedily consuming query
letters in order. Each matched letter earns bonuses depending on its
neighbourhood (directly after another match, after a separator, at a
camel-case hump) and every character not used costs a small penalty.
Characters skipped before the first match are penalised separately, up
to a cap, so that matches near the start of a string rank higher.

When the same query letter could be matched by a later character with a
better bonus, the matcher keeps the better candidate. This is why
"cherr" prefers the "E" that starts "Errors" over the "e" inside
"Checkout".

Example:
    >>> from honeyfind.core.fuzzy import match
    >>> match("Checkout Errors", "cherr").matched
    True
"""

from __future__ import annotations

import unicodedata
from dataclasses import dataclass
from typing import TYPE_CHECKING, Generic, TypeVar


if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from honeyfind.core.models import Dataset


T = TypeVar("T")

SEPARATORS = frozenset(" _-")


@dataclass(frozen=True, slots=True)
class MatchOptions:
    """Tunable weights for the fuzzy matcher.

    Penalties are negative numbers and are added to the score.

    Attributes:
        adjacency_bonus: Added for a match directly after another match.
        separator_bonus: Added for a match after a separator or at the start.
        camel_bonus: Added for an uppercase match after a lowercase letter.
        leading_letter_penalty: Per character skipped before the first match.
        max_leading_letter_penalty: Floor for the total leading penalty.
        unmatched_letter_penalty: Per character not used by the match.
        strip_diacritics: Compare "é" and "e" as equal.
    """

    adjacency_bonus: float = 5.0
    separator_bonus: float = 10.0
    camel_bonus: float = 10.0
    leading_letter_penalty: float = -3.0
    max_leading_letter_penalty: float = -9.0
    unmatched_letter_penalty: float = -1.0
    strip_diacritics: bool = True


DEFAULT_OPTIONS = MatchOptions()

# Favours contiguous runs and barely punishes long names
LAUNCHER_OPTIONS = MatchOptions(
    adjacency_bonus=10.0,
    leading_letter_penalty=-0.1,
    max_leading_letter_penalty=-3.0,
    unmatched_letter_penalty=-0.5,
)


@dataclass(frozen=True, slots=True)
class Match:
    """Outcome of matching one string against a query.

    Attributes:
        matched: True if every query letter was found in order.
        score: Higher is better. Only meaningful when matched.
        positions: Indexes into the text of the matched characters.
    """

    matched: bool
    score: float
    positions: tuple[int, ...] = ()


@dataclass(frozen=True, slots=True)
class Ranked(Generic[T]):
    """An item that survived filtering, with its score."""

    item: T
    score: float


def _fold(char: str, strip_diacritics: bool) -> str:
    """Fold a character for comparison, keeping a one-to-one mapping."""
    if strip_diacritics and not char.isascii():
        decomposed = unicodedata.normalize("NFKD", char)
        base = "".join(c for c in decomposed if not unicodedata.combining(c))
        if len(base) == 1:
            char = base
    return char


def _lower(char: str) -> str:
    lowered = char.lower()
    return lowered if len(lowered) == 1 else char


def match(text: str, query: str, options: MatchOptions = DEFAULT_OPTIONS) -> Match:
    """Score text against query.

    Args:
        text: Candidate string, e.g. a dataset name.
        query: What the user typed. Case and diacritics are ignored.
        options: Scoring weights.

    Returns:
        Match with matched=False if the query is not a subsequence of text.
    """
    if not query:
        return Match(matched=True, score=0.0)

    pattern = [_lower(_fold(c, options.strip_diacritics)) for c in query]
    pattern_len = len(pattern)
    pattern_idx = 0

    score = 0.0
    positions: list[int] = []

    prev_matched = False
    prev_lower = False
    prev_separator = True  # start of string counts as a separator

    best_letter: str | None = None
    best_idx = -1
    best_score = 0.0

    for idx, raw in enumerate(text):
        char = _fold(raw, options.strip_diacritics)
        lower = _lower(char)
        is_upper = char != lower

        next_match = pattern_idx < pattern_len and pattern[pattern_idx] == lower
        rematch = best_letter is not None and best_letter == lower
        advanced = next_match and best_letter is not None
        pattern_repeat = (
            best_letter is not None
            and pattern_idx < pattern_len
            and pattern[pattern_idx] == best_letter
        )

        # Commit the pending candidate before moving on to the next letter
        if advanced or pattern_repeat:
            score += best_score
            positions.append(best_idx)
            best_letter = None
            best_idx = -1
            best_score = 0.0

        if next_match or rematch:
            new_score = 0.0

            if pattern_idx == 0:
                score += max(
                    idx * options.leading_letter_penalty,
                    options.max_leading_letter_penalty,
                )
            if prev_matched:
                new_score += options.adjacency_bonus
            if prev_separator:
                new_score += options.separator_bonus
            if prev_lower and is_upper:
                new_score += options.camel_bonus

            if next_match:
                pattern_idx += 1

            if new_score >= best_score:
                # The replaced candidate becomes an unmatched letter
                if best_letter is not None:
                    score += options.unmatched_letter_penalty
                best_letter = lower
                best_idx = idx
                best_score = new_score

            prev_matched = True
        else:
            score += options.unmatched_letter_penalty
            prev_matched = False

        prev_lower = char == lower and lower != char.upper()
        prev_separator = raw in SEPARATORS

    if best_letter is not None:
        score += best_score
        positions.append(best_idx)

    matched = pattern_idx == pattern_len
    return Match(matched=matched, score=score, positions=tuple(sorted(positions)))


def rank(
    items: Sequence[T],
    query: str,
    key: Callable[[T], str],
    options: MatchOptions = DEFAULT_OPTIONS,
    limit: int | None = None,
) -> list[Ranked[T]]:
    """Filter and order items by how well key(item) matches query.

    An empty query keeps every item in input order, uncapped.
    Otherwise items that do not match are dropped, the rest are sorted by
    descending score (ties keep input order) and then cut to limit.

    Args:
        items: Candidates in their natural order.
        query: What the user typed.
        key: Returns the text to match for an item.
        options: Scoring weights.
        limit: Maximum number of results for a non-empty query.

    Returns:
        Ranked items, best first.
    """
    if not query:
        return [Ranked(item, 0.0) for item in items]

    results = []
    for item in items:
        result = match(key(item), query, options)
        if result.matched:
            results.append(Ranked(item, result.score))

    # sorted() is stable, so equal scores keep input order
    results = sorted(results, key=lambda r: r.score, reverse=True)
    if limit is not None:
        results = results[:limit]
    return results


def filter_datasets(
    datasets: Sequence[Dataset],
    query: str,
    options: MatchOptions = LAUNCHER_OPTIONS,
    limit: int = 200,
) -> list[Dataset]:
    """Return datasets whose names match query, best first."""
    return [r.item for r in rank(datasets, query, lambda d: d.name, options, limit)]
