import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from core.filter import FilterState, filter_listings
from core.grouping import group_by_category
from core.listing import Listing


class TestGroupByCategory:
    def test_single_group_scenario(self):
        listings = [
            Listing(name="Sunset Hotel", category="1.Hotels", area="2.Bodija"),
            Listing(name="Sunrise Cafe", category="3.Cafes", area="2.Bodija"),
        ]
        filtered = filter_listings(listings, FilterState(selected_category="1.Hotels"))
        groups = group_by_category(filtered)
        assert len(groups) == 1
        assert groups[0].title == "1.Hotels"
        assert groups[0].count == 1
        assert groups[0].display_name == "Hotels"

    def test_sorted_by_count_descending(self):
        listings = (
            [Listing(name=f"Cafe {i}", category="3.Cafes") for i in range(2)]
            + [Listing(name=f"Hotel {i}", category="1.Hotels") for i in range(5)]
            + [Listing(name="Hall", category="6.Event Halls")]
        )
        groups = group_by_category(listings)
        assert [g.title for g in groups] == ["1.Hotels", "3.Cafes", "6.Event Halls"]
        for a, b in zip(groups, groups[1:]):
            assert a.count >= b.count

    def test_ties_keep_first_seen_order(self):
        listings = [
            Listing(name="B1", category="2.Bars"),
            Listing(name="A1", category="1.Apartments"),
            Listing(name="B2", category="2.Bars"),
            Listing(name="A2", category="1.Apartments"),
        ]
        groups = group_by_category(listings)
        assert [g.title for g in groups] == ["2.Bars", "1.Apartments"]

    def test_items_capped_at_ten(self):
        listings = [Listing(name=f"Hotel {i}", category="1.Hotels") for i in range(14)]
        group = group_by_category(listings)[0]
        assert group.count == 14
        assert len(group.items) == 10
        assert [item.name for item in group.items] == [f"Hotel {i}" for i in range(10)]

    def test_missing_category_goes_to_other_bucket(self):
        listings = [Listing(name="No category"), Listing(name="Blank", category="")]
        groups = group_by_category(listings)
        assert len(groups) == 1
        assert groups[0].title == "other.other"
        assert groups[0].display_name == "Other"
        assert groups[0].count == 2

    def test_empty_input(self):
        assert group_by_category([]) == []
