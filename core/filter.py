from dataclasses import dataclass

from core.listing import Listing
from core.naming import category_display_name, location_display_name

SORT_OPTIONS = ("relevance", "price_low", "price_high", "rating", "name")


@dataclass
class FilterState:
    search_term: str = ""
    selected_category: str | None = None
    selected_location: str | None = None


@dataclass
class RefineOptions:
    min_price: float | None = None
    max_price: float | None = None
    min_rating: float | None = None
    sort_by: str = "relevance"


def _number(value: str) -> float:
    try:
        return float(str(value).replace(",", "").strip())
    except (TypeError, ValueError):
        return 0.0


def _contains(term: str, text: str) -> bool:
    return bool(text) and term in text.lower()


def matches_category(listing: Listing, state: FilterState) -> bool:
    if state.selected_category is None:
        return True
    return listing.category == state.selected_category


def matches_location(listing: Listing, state: FilterState) -> bool:
    if state.selected_location is None:
        return True
    return listing.area == state.selected_location


def matches_text(listing: Listing, state: FilterState) -> bool:
    term = state.search_term.strip().lower()
    if not term:
        return True
    # Empty raw values have no display text to match against.
    area_text = location_display_name(listing.area) if listing.area else ""
    category_text = category_display_name(listing.category) if listing.category else ""
    return (
        _contains(term, listing.name)
        or _contains(term, area_text)
        or _contains(term, category_text)
    )


def matches_scope(listing: Listing, state: FilterState) -> bool:
    """Category and location predicates only, ignoring the search term."""
    return matches_category(listing, state) and matches_location(listing, state)


def matches(listing: Listing, state: FilterState) -> bool:
    return matches_scope(listing, state) and matches_text(listing, state)


def filter_listings(listings: list[Listing], state: FilterState) -> list[Listing]:
    return [item for item in listings if matches(item, state)]


def matches_price_range(listing: Listing, options: RefineOptions) -> bool:
    if options.min_price is None and options.max_price is None:
        return True
    price = _number(listing.price_from)
    if options.min_price is not None and price < options.min_price:
        return False
    if options.max_price is not None and price > options.max_price:
        return False
    return True


def matches_rating(listing: Listing, options: RefineOptions) -> bool:
    if options.min_rating is None:
        return True
    return _number(listing.rating) >= options.min_rating


def sort_listings(listings: list[Listing], sort_by: str) -> list[Listing]:
    if sort_by == "price_low":
        return sorted(listings, key=lambda item: _number(item.price_from))
    if sort_by == "price_high":
        return sorted(listings, key=lambda item: _number(item.price_from), reverse=True)
    if sort_by == "rating":
        return sorted(listings, key=lambda item: _number(item.rating), reverse=True)
    if sort_by == "name":
        return sorted(listings, key=lambda item: item.name.lower())
    return list(listings)


def refine_listings(listings: list[Listing], options: RefineOptions) -> list[Listing]:
    refined = [
        item
        for item in listings
        if matches_price_range(item, options) and matches_rating(item, options)
    ]
    return sort_listings(refined, options.sort_by)
