"""Ranked autocomplete suggestions for the search box.

Suggestions come in two kinds: categories whose display name contains the
typed term, and areas whose display name contains it. Counts are scoped by
the currently selected category/location, never by the term itself, so a
suggestion tells the user how many places they would see after picking it.
"""

from dataclasses import dataclass, field
from typing import Callable

from core.filter import FilterState, matches_scope
from core.listing import Listing
from core.naming import category_display_name, location_display_name

SUGGESTION_LIMIT = 3
SUBCATEGORY_LIMIT = 3


@dataclass
class Subcategory:
    name: str
    count: int


@dataclass
class Suggestion:
    type: str
    display: str
    value: str
    count: int
    subcategories: list[Subcategory] | None = None


@dataclass
class _Candidate:
    value: str
    display: str
    members: list[Listing] = field(default_factory=list)


def _subcategories(members: list[Listing], limit: int) -> list[Subcategory]:
    counts: dict[str, int] = {}
    for item in members:
        name = category_display_name(item.category)
        counts[name] = counts.get(name, 0) + 1
    return [Subcategory(name=name, count=count) for name, count in counts.items()][:limit]


def _rank(
    term: str,
    values: list[str],
    scoped: list[Listing],
    field_of: Callable[[Listing], str],
    to_display: Callable[[str | None], str],
    limit: int,
) -> list[_Candidate]:
    candidates = []
    for value in values:
        if not value:
            continue
        display = to_display(value)
        if term not in display.lower():
            continue
        members = [item for item in scoped if field_of(item) == value]
        if members:
            candidates.append(_Candidate(value=value, display=display, members=members))

    candidates.sort(
        key=lambda c: (c.display.lower().startswith(term), len(c.members)),
        reverse=True,
    )
    return candidates[:limit]


def suggest(
    search_term: str,
    listings: list[Listing],
    categories: list[str],
    locations: list[str],
    state: FilterState | None = None,
    limit: int = SUGGESTION_LIMIT,
    subcategory_limit: int = SUBCATEGORY_LIMIT,
) -> list[Suggestion]:
    term = (search_term or "").strip().lower()
    if not term:
        return []

    state = state or FilterState()
    scoped = [item for item in listings if matches_scope(item, state)]

    category_hits = _rank(
        term, categories, scoped, lambda item: item.category, category_display_name, limit
    )
    area_hits = _rank(
        term, locations, scoped, lambda item: item.area, location_display_name, limit
    )

    suggestions = [
        Suggestion(type="category", display=c.display, value=c.value, count=len(c.members))
        for c in category_hits
    ]
    suggestions.extend(
        Suggestion(
            type="area",
            display=c.display,
            value=c.value,
            count=len(c.members),
            subcategories=_subcategories(c.members, subcategory_limit),
        )
        for c in area_hits
    )
    return suggestions
