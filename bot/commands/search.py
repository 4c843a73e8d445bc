from typing import TYPE_CHECKING

import discord
from discord import app_commands

from bot.embeds import results_embed, suggestions_embed
from config import settings
from core.filter import SORT_OPTIONS, FilterState, RefineOptions, filter_listings, refine_listings
from core.grouping import group_by_category
from core.naming import (
    LOCATION_FALLBACK,
    category_display_name,
    location_display_name,
    raw_from_display_name,
)
from core.session import choice_value
from core.suggest import suggest

if TYPE_CHECKING:
    from bot.main import DirectoryBot

MAX_CHOICES = 25


@app_commands.guild_install()
@app_commands.allowed_contexts(guilds=True, dms=True, private_channels=True)
class SearchCommands(app_commands.Group):
    def __init__(self, bot: "DirectoryBot"):
        super().__init__(name="search", description="Search the vendor directory")
        self.bot = bot

    async def _defer(self, interaction: discord.Interaction) -> bool:
        try:
            await interaction.response.defer(ephemeral=True)
        except discord.NotFound:
            return False
        return True

    async def _send(self, interaction: discord.Interaction, *args, **kwargs) -> None:
        try:
            await interaction.followup.send(*args, **kwargs)
        except discord.NotFound:
            pass

    async def _send_results(
        self,
        interaction: discord.Interaction,
        state: FilterState,
        options: RefineOptions | None = None,
    ) -> None:
        listings = await self.bot.catalog.load()
        matched = filter_listings(listings, state)
        if options:
            matched = refine_listings(matched, options)
        groups = group_by_category(matched, limit=settings.group_item_limit)
        await self._send(interaction, embed=results_embed(groups, state))

    def _suggest_choices(
        self,
        current: str,
        kind: str,
        state: FilterState,
    ) -> list[app_commands.Choice[str]]:
        catalog = self.bot.catalog
        suggestions = suggest(
            current,
            catalog.listings,
            catalog.categories,
            catalog.locations,
            state,
            limit=MAX_CHOICES,
            subcategory_limit=settings.subcategory_limit,
        )
        suggestions = [s for s in suggestions if s.type == kind]
        return [
            app_commands.Choice(name=f"{s.display} ({s.count})"[:100], value=s.value[:100])
            for s in suggestions[:MAX_CHOICES]
        ]

    @app_commands.command(name="text", description="Search by name, category or area")
    @app_commands.describe(term="Free text to search for")
    async def text(self, interaction: discord.Interaction, term: str) -> None:
        if not await self._defer(interaction):
            return

        catalog = self.bot.catalog
        await catalog.load()
        session = self.bot.get_session(interaction.user.id)
        session.apply_choice(term, catalog.categories, catalog.locations)
        await self._send_results(interaction, session.filter_state)

    @text.autocomplete("term")
    async def text_autocomplete(
        self, interaction: discord.Interaction, current: str
    ) -> list[app_commands.Choice[str]]:
        state = self.bot.get_session(interaction.user.id).filter_state
        suggestions = suggest(
            current,
            self.bot.catalog.listings,
            self.bot.catalog.categories,
            self.bot.catalog.locations,
            state,
            limit=settings.suggestion_limit,
            subcategory_limit=settings.subcategory_limit,
        )
        choices = []
        for s in suggestions:
            value = choice_value(s.type, s.value)
            if len(value) > 100:
                value = s.display[:100]
            choices.append(app_commands.Choice(name=f"{s.display} ({s.count})"[:100], value=value))
        return choices

    @app_commands.command(name="category", description="Filter by category")
    @app_commands.describe(category="Category to show")
    async def category(self, interaction: discord.Interaction, category: str) -> None:
        if not await self._defer(interaction):
            return

        await self.bot.catalog.load()
        candidates = self.bot.catalog.categories
        raw = category if category in candidates else raw_from_display_name(category, candidates)
        if not raw:
            await self._send(interaction, f"Unknown category `{category}`")
            return

        session = self.bot.get_session(interaction.user.id)
        session.select_category(raw)
        await self._send_results(interaction, session.filter_state)

    @category.autocomplete("category")
    async def category_autocomplete(
        self, interaction: discord.Interaction, current: str
    ) -> list[app_commands.Choice[str]]:
        if not current.strip():
            groups = group_by_category(self.bot.catalog.listings, limit=0)
            return [
                app_commands.Choice(name=f"{g.display_name} ({g.count})"[:100], value=g.title[:100])
                for g in groups[:MAX_CHOICES]
                if g.title in self.bot.catalog.categories
            ]
        # Selecting a category drops the location, so rank without it.
        return self._suggest_choices(current, kind="category", state=FilterState())

    @app_commands.command(name="location", description="Filter by area")
    @app_commands.describe(location="Area to show")
    async def location(self, interaction: discord.Interaction, location: str) -> None:
        if not await self._defer(interaction):
            return

        await self.bot.catalog.load()
        candidates = self.bot.catalog.locations
        raw = (
            location
            if location in candidates
            else raw_from_display_name(location, candidates, LOCATION_FALLBACK)
        )
        if not raw:
            await self._send(interaction, f"Unknown location `{location}`")
            return

        session = self.bot.get_session(interaction.user.id)
        session.select_location(raw)
        await self._send_results(interaction, session.filter_state)

    @location.autocomplete("location")
    async def location_autocomplete(
        self, interaction: discord.Interaction, current: str
    ) -> list[app_commands.Choice[str]]:
        if not current.strip():
            return [
                app_commands.Choice(name=location_display_name(loc)[:100], value=loc[:100])
                for loc in self.bot.catalog.locations[:MAX_CHOICES]
            ]
        return self._suggest_choices(current, kind="area", state=FilterState())

    @app_commands.command(name="show", description="Show results for your current search")
    @app_commands.describe(
        sort="Sort order within each category",
        min_price="Minimum starting price",
        max_price="Maximum starting price",
        min_rating="Minimum rating (0-5)",
    )
    @app_commands.choices(
        sort=[app_commands.Choice(name=opt.replace("_", " "), value=opt) for opt in SORT_OPTIONS]
    )
    async def show(
        self,
        interaction: discord.Interaction,
        sort: str = "relevance",
        min_price: float | None = None,
        max_price: float | None = None,
        min_rating: float | None = None,
    ) -> None:
        if not await self._defer(interaction):
            return

        options = RefineOptions(
            min_price=min_price,
            max_price=max_price,
            min_rating=min_rating,
            sort_by=sort,
        )
        session = self.bot.get_session(interaction.user.id)
        await self._send_results(interaction, session.filter_state, options)

    @app_commands.command(name="suggest", description="List matching categories and areas")
    @app_commands.describe(term="Text to get suggestions for")
    async def suggest_command(self, interaction: discord.Interaction, term: str) -> None:
        if not await self._defer(interaction):
            return

        catalog = self.bot.catalog
        await catalog.load()
        session = self.bot.get_session(interaction.user.id)
        suggestions = suggest(
            term,
            catalog.listings,
            catalog.categories,
            catalog.locations,
            session.filter_state,
            limit=settings.suggestion_limit,
            subcategory_limit=settings.subcategory_limit,
        )
        await self._send(interaction, embed=suggestions_embed(term, suggestions))

    @app_commands.command(name="clear", description="Clear the search text and filters")
    async def clear(self, interaction: discord.Interaction) -> None:
        if not await self._defer(interaction):
            return

        self.bot.get_session(interaction.user.id).clear()
        await self._send(interaction, "Search cleared")

    @app_commands.command(name="status", description="Show your current search filters")
    async def status(self, interaction: discord.Interaction) -> None:
        if not await self._defer(interaction):
            return

        session = self.bot.get_session(interaction.user.id)
        state = session.filter_state
        lines = [f"State: `{session.selection.value}`"]
        lines.append(f"Text: `{state.search_term or '-'}`")
        if state.selected_category:
            lines.append(f"Category: {category_display_name(state.selected_category)}")
        if state.selected_location:
            lines.append(f"Location: {location_display_name(state.selected_location)}")
        await self._send(interaction, "\n".join(lines))
