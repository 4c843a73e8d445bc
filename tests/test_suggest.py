import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from core.filter import FilterState
from core.listing import Listing, distinct_categories, distinct_locations
from core.suggest import Subcategory, Suggestion, suggest


def run_suggest(term: str, listings: list[Listing], state: FilterState | None = None):
    return suggest(
        term,
        listings,
        distinct_categories(listings),
        distinct_locations(listings),
        state or FilterState(),
    )


class TestSuggest:
    def test_area_scenario(self):
        listings = [
            Listing(name="Sunset Hotel", category="1.Hotels", area="2.Bodija"),
            Listing(name="Sunrise Cafe", category="3.Cafes", area="2.Bodija"),
        ]
        result = run_suggest("Bodija", listings)
        assert result == [
            Suggestion(
                type="area",
                display="Bodija",
                value="2.Bodija",
                count=2,
                subcategories=[Subcategory("Hotels", 1), Subcategory("Cafes", 1)],
            )
        ]

    def test_empty_term_gives_nothing(self):
        listings = [Listing(name="Sunset Hotel", category="1.Hotels", area="2.Bodija")]
        assert run_suggest("", listings) == []
        assert run_suggest("   ", listings) == []

    def test_categories_before_areas(self):
        listings = [
            Listing(name="A", category="1.Bar", area="5.Barracks"),
            Listing(name="B", category="2.Cafe", area="5.Barracks"),
            Listing(name="C", category="3.Cafe", area="5.Barracks"),
        ]
        result = run_suggest("bar", listings)
        assert [s.type for s in result] == ["category", "area"]
        assert result[1].count == 3

    def test_prefix_match_outranks_count(self):
        listings = (
            [Listing(name=f"L{i}", category="1.Cocktail Bars") for i in range(5)]
            + [Listing(name="Solo", category="2.Bars")]
        )
        result = run_suggest("bar", listings)
        assert [s.value for s in result] == ["2.Bars", "1.Cocktail Bars"]
        assert [s.count for s in result] == [1, 5]

    def test_top_three_per_type(self):
        listings = [Listing(name=f"L{i}", category=f"{i}.Hall {i}", area=f"{i}.Hall Road {i}") for i in range(6)]
        result = run_suggest("hall", listings)
        assert len([s for s in result if s.type == "category"]) == 3
        assert len([s for s in result if s.type == "area"]) == 3
        assert len(result) <= 6

    def test_counts_scoped_by_selected_location(self):
        listings = [
            Listing(name="A", category="1.Hotels", area="2.Bodija"),
            Listing(name="B", category="1.Hotels", area="4.Ring Road"),
            Listing(name="C", category="3.Cafes", area="4.Ring Road"),
        ]
        state = FilterState(selected_location="2.Bodija")
        result = run_suggest("hotel", listings, state)
        assert len(result) == 1
        assert result[0].count == 1

    def test_zero_count_candidates_dropped(self):
        listings = [
            Listing(name="A", category="1.Hotels", area="2.Bodija"),
            Listing(name="B", category="3.Cafes", area="4.Ring Road"),
        ]
        state = FilterState(selected_category="1.Hotels")
        result = run_suggest("cafe", listings, state)
        assert result == []
        for s in run_suggest("o", listings, state):
            assert s.count > 0

    def test_search_term_does_not_scope_counts(self):
        listings = [
            Listing(name="Grand", category="1.Hotels", area="2.Bodija"),
            Listing(name="Other", category="1.Hotels", area="2.Bodija"),
        ]
        result = run_suggest("hotels", listings, FilterState(search_term="grand"))
        assert result[0].count == 2

    def test_subcategories_capped_and_in_insertion_order(self):
        listings = [
            Listing(name="A", category="1.Hotels", area="2.Bodija"),
            Listing(name="B", category="3.Cafes", area="2.Bodija"),
            Listing(name="C", category="3.Cafes", area="2.Bodija"),
            Listing(name="D", category="4.Bars", area="2.Bodija"),
            Listing(name="E", category="5.Spas", area="2.Bodija"),
        ]
        result = run_suggest("bodija", listings)
        subs = result[0].subcategories
        assert [s.name for s in subs] == ["Hotels", "Cafes", "Bars"]
        assert [s.count for s in subs] == [1, 2, 1]

    def test_malformed_rows_do_not_crash(self):
        listings = [
            Listing(name="", category="", area=""),
            Listing(name="Sunset Hotel", category="1.Hotels", area="2.Bodija"),
        ]
        result = suggest("other", listings, ["", "1.Hotels"], ["", "2.Bodija"], FilterState())
        assert result == []

    def test_deterministic(self):
        listings = [
            Listing(name="Sunset Hotel", category="1.Hotels", area="2.Bodija"),
            Listing(name="Sunrise Cafe", category="3.Cafes", area="2.Bodija"),
        ]
        assert run_suggest("o", listings) == run_suggest("o", listings)
