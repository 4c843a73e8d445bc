from dataclasses import dataclass, field

from core.listing import Listing
from core.naming import OTHER_CATEGORY, category_display_name

GROUP_ITEM_LIMIT = 10


@dataclass
class CategoryGroup:
    title: str
    count: int
    display_name: str
    items: list[Listing] = field(default_factory=list)


def group_by_category(
    listings: list[Listing],
    limit: int = GROUP_ITEM_LIMIT,
) -> list[CategoryGroup]:
    """Group listings by raw category, largest group first.

    Only the first ``limit`` listings of each group are kept in ``items``;
    ``count`` is always the full size. Equal counts keep the order in which
    each category was first seen.
    """
    partitions: dict[str, list[Listing]] = {}
    for item in listings:
        partitions.setdefault(item.category or OTHER_CATEGORY, []).append(item)

    groups = [
        CategoryGroup(
            title=category,
            count=len(items),
            display_name=category_display_name(category),
            items=items[:limit],
        )
        for category, items in partitions.items()
    ]
    groups.sort(key=lambda g: g.count, reverse=True)
    return groups
