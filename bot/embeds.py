import discord

from core.filter import FilterState
from core.grouping import CategoryGroup
from core.listing import Listing, card_images
from core.naming import category_display_name, location_display_name, slug
from core.suggest import Suggestion

MAX_FIELDS = 25
MAX_FIELD_LEN = 1024


def _listing_line(listing: Listing) -> str:
    parts = [f"**{listing.name or 'Unnamed'}**"]
    if listing.area:
        parts.append(location_display_name(listing.area))
    if listing.price_from:
        parts.append(f"from ₦{listing.price_from}")
    if listing.rating:
        parts.append(f"★ {listing.rating}")
    return " · ".join(parts)


def _field_value(lines: list[str]) -> str:
    value = ""
    for line in lines:
        if len(value) + len(line) + 1 > MAX_FIELD_LEN:
            break
        value = f"{value}\n{line}" if value else line
    return value or "-"


def _describe_state(state: FilterState) -> str:
    parts = []
    if state.search_term.strip():
        parts.append(f'Search: "{state.search_term.strip()}"')
    if state.selected_category:
        parts.append(f"Category: {category_display_name(state.selected_category)}")
    if state.selected_location:
        parts.append(f"Location: {location_display_name(state.selected_location)}")
    return " | ".join(parts) or "All listings"


def results_embed(groups: list[CategoryGroup], state: FilterState) -> discord.Embed:
    total = sum(g.count for g in groups)
    embed = discord.Embed(
        title=f"{total} {'place' if total == 1 else 'places'} found",
        description=_describe_state(state),
        color=discord.Color.blue(),
    )

    for group in groups[:MAX_FIELDS]:
        lines = [_listing_line(item) for item in group.items]
        if group.count > len(group.items):
            lines.append(f"…and {group.count - len(group.items)} more (`{slug(group.title)}`)")
        embed.add_field(
            name=f"{group.display_name} ({group.count})",
            value=_field_value(lines),
            inline=False,
        )

    if groups and groups[0].items:
        embed.set_thumbnail(url=card_images(groups[0].items[0])[0])
    return embed


def suggestions_embed(term: str, suggestions: list[Suggestion]) -> discord.Embed:
    embed = discord.Embed(
        title=f'Suggestions for "{term}"',
        color=discord.Color.green(),
    )
    if not suggestions:
        embed.description = "No matching categories or areas"
        return embed

    for suggestion in suggestions:
        noun = "place" if suggestion.count == 1 else "places"
        if suggestion.type == "category":
            name = f"🏷️ {suggestion.display}"
            value = f"{suggestion.count} {noun}"
        else:
            name = f"📍 {suggestion.display}"
            value = f"{suggestion.count} {noun}"
            if suggestion.subcategories:
                breakdown = ", ".join(f"{s.name} ({s.count})" for s in suggestion.subcategories)
                value = f"{value}\n{breakdown}"
        embed.add_field(name=name, value=value, inline=False)
    return embed
