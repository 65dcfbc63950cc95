"""
Domain Service: Matching

Predicates and sort keys used to build projections.
"""

from typing import Any, Callable

from riddle_access.models import Riddle

Predicate = Callable[[Riddle], bool]
SortKey = Callable[[Riddle], Any]


def match_all() -> Predicate:
    """Predicate accepting every riddle."""
    return lambda riddle: True


def match_keyword(term: str) -> Predicate:
    """
    Case-insensitive substring match on question, answer or category.

    A blank term matches everything.
    """
    needle = (term or "").strip().casefold()
    if not needle:
        return match_all()

    def predicate(riddle: Riddle) -> bool:
        return (
            needle in riddle.question.casefold()
            or needle in riddle.answer.casefold()
            or needle in riddle.category.casefold()
        )

    return predicate


def match_category(category: str, strict: bool = False) -> Predicate:
    """
    Category predicate.

    Loose matching (the default) behaves like a keyword search, so a
    category name also finds riddles that merely mention it. Strict
    matching requires exact category equality.
    """
    if not strict:
        return match_keyword(category)

    wanted = (category or "").strip()
    if not wanted:
        return match_all()
    return lambda riddle: riddle.category.strip() == wanted


def by_popularity_desc(riddle: Riddle) -> Any:
    """Sort key for popularity, highest first (use with a stable sort)."""
    return -riddle.popularity
