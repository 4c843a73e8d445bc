import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from core.filter import (
    FilterState,
    RefineOptions,
    filter_listings,
    matches,
    matches_category,
    matches_location,
    matches_text,
    refine_listings,
)
from core.listing import Listing


def make_listings() -> list[Listing]:
    return [
        Listing(name="Sunset Hotel", category="1.Hotels", area="2.Bodija", price_from="25000", rating="4.5"),
        Listing(name="Sunrise Cafe", category="3.Cafes", area="2.Bodija", price_from="3000", rating="4.8"),
        Listing(name="Ring Road Suites", category="1.Hotels", area="4.Ring Road", price_from="18000", rating="3.9"),
        Listing(name="Mystery Spot", category="", area="", price_from="", rating=""),
    ]


class TestPredicates:
    def test_unset_filters_match_everything(self):
        state = FilterState()
        assert all(matches(item, state) for item in make_listings())

    def test_category_uses_raw_equality(self):
        hotel = make_listings()[0]
        assert matches_category(hotel, FilterState(selected_category="1.Hotels")) is True
        assert matches_category(hotel, FilterState(selected_category="Hotels")) is False

    def test_location_uses_raw_equality(self):
        hotel = make_listings()[0]
        assert matches_location(hotel, FilterState(selected_location="2.Bodija")) is True
        assert matches_location(hotel, FilterState(selected_location="4.Ring Road")) is False

    def test_empty_selection_is_still_a_filter(self):
        state = FilterState(selected_category="", selected_location="")
        assert [item.name for item in filter_listings(make_listings(), state)] == ["Mystery Spot"]

    def test_text_matches_name_area_and_category_display(self):
        hotel = make_listings()[0]
        assert matches_text(hotel, FilterState(search_term="sunset")) is True
        assert matches_text(hotel, FilterState(search_term="BODIJA")) is True
        assert matches_text(hotel, FilterState(search_term="hotels")) is True
        assert matches_text(hotel, FilterState(search_term="cafe")) is False

    def test_text_ignores_ordinal_prefix(self):
        hotel = make_listings()[0]
        assert matches_text(hotel, FilterState(search_term="1.")) is False

    def test_blank_fields_never_match_text(self):
        blank = make_listings()[3]
        assert matches_text(blank, FilterState(search_term="other")) is False
        assert matches_text(blank, FilterState(search_term="unknown")) is False
        assert matches_text(blank, FilterState(search_term="mystery")) is True


class TestFilterListings:
    def test_selected_category_scenario(self):
        result = filter_listings(make_listings()[:2], FilterState(selected_category="1.Hotels"))
        assert [item.name for item in result] == ["Sunset Hotel"]

    def test_preserves_input_order(self):
        result = filter_listings(make_listings(), FilterState(search_term="hotel"))
        assert [item.name for item in result] == ["Sunset Hotel", "Ring Road Suites"]

    def test_conjunction(self):
        state = FilterState(search_term="hotel", selected_location="4.Ring Road")
        result = filter_listings(make_listings(), state)
        assert [item.name for item in result] == ["Ring Road Suites"]

    def test_repeated_calls_identical(self):
        listings = make_listings()
        state = FilterState(search_term="bodija")
        assert filter_listings(listings, state) == filter_listings(listings, state)


class TestRefine:
    def test_price_range_inclusive(self):
        options = RefineOptions(min_price=3000, max_price=18000)
        result = refine_listings(make_listings(), options)
        assert [item.name for item in result] == ["Sunrise Cafe", "Ring Road Suites"]

    def test_unparseable_price_counts_as_zero(self):
        result = refine_listings(make_listings(), RefineOptions(max_price=0))
        assert [item.name for item in result] == ["Mystery Spot"]

    def test_min_rating(self):
        result = refine_listings(make_listings(), RefineOptions(min_rating=4.5))
        assert [item.name for item in result] == ["Sunset Hotel", "Sunrise Cafe"]

    def test_sort_options(self):
        listings = make_listings()[:3]
        low = refine_listings(listings, RefineOptions(sort_by="price_low"))
        assert [item.name for item in low] == ["Sunrise Cafe", "Ring Road Suites", "Sunset Hotel"]
        high = refine_listings(listings, RefineOptions(sort_by="price_high"))
        assert [item.name for item in high] == ["Sunset Hotel", "Ring Road Suites", "Sunrise Cafe"]
        rating = refine_listings(listings, RefineOptions(sort_by="rating"))
        assert [item.name for item in rating] == ["Sunrise Cafe", "Sunset Hotel", "Ring Road Suites"]
        by_name = refine_listings(listings, RefineOptions(sort_by="name"))
        assert [item.name for item in by_name] == ["Ring Road Suites", "Sunrise Cafe", "Sunset Hotel"]

    def test_relevance_keeps_order(self):
        listings = make_listings()
        assert refine_listings(listings, RefineOptions()) == listings
