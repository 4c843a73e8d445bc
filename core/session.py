from dataclasses import replace
from enum import Enum

from core.filter import FilterState
from core.naming import category_display_name, location_display_name


def choice_value(kind: str, raw: str) -> str:
    return f"{kind}:{raw}"


class SelectionState(Enum):
    NO_FILTER = "no_filter"
    CATEGORY_SELECTED = "category_selected"
    LOCATION_SELECTED = "location_selected"


class SearchSession:
    """Filter state for one user of the search box.

    Category and location selections are mutually exclusive. Picking one
    replaces the visible search text with its display name.
    """

    def __init__(self) -> None:
        self._state = FilterState()

    @property
    def filter_state(self) -> FilterState:
        return replace(self._state)

    @property
    def search_term(self) -> str:
        return self._state.search_term

    @property
    def selection(self) -> SelectionState:
        if self._state.selected_category is not None:
            return SelectionState.CATEGORY_SELECTED
        if self._state.selected_location is not None:
            return SelectionState.LOCATION_SELECTED
        return SelectionState.NO_FILTER

    def select_category(self, raw: str) -> None:
        self._state.selected_category = raw
        self._state.selected_location = None
        self._state.search_term = category_display_name(raw)

    def select_location(self, raw: str) -> None:
        self._state.selected_location = raw
        self._state.selected_category = None
        self._state.search_term = location_display_name(raw)

    def type_text(self, text: str) -> None:
        self._state.search_term = text
        typed = text.lower()

        # Substring check, not token match: "Bodija Hotels" keeps "Hotels".
        if self._state.selected_category is not None:
            name = category_display_name(self._state.selected_category).lower()
            if name not in typed:
                self._state.selected_category = None
        if self._state.selected_location is not None:
            name = location_display_name(self._state.selected_location).lower()
            if name not in typed:
                self._state.selected_location = None

    def apply_choice(self, value: str, categories: list[str], locations: list[str]) -> None:
        """Select the category or area a suggestion points at.

        Anything that is not an encoded choice for a known value is treated
        as typed text.
        """
        kind, sep, raw = value.partition(":")
        if sep and kind == "category" and raw in categories:
            self.select_category(raw)
        elif sep and kind == "area" and raw in locations:
            self.select_location(raw)
        else:
            self.type_text(value)

    def clear(self) -> None:
        self._state = FilterState()
