from typing import TYPE_CHECKING

import discord
from discord import app_commands

from db.models import RefreshStatus

if TYPE_CHECKING:
    from bot.main import DirectoryBot


@app_commands.guild_install()
@app_commands.allowed_contexts(guilds=True, dms=True, private_channels=True)
class StatsCommands(app_commands.Group):
    def __init__(self, bot: "DirectoryBot"):
        super().__init__(name="stats", description="View directory statistics")
        self.bot = bot

    @app_commands.command(name="overview", description="Show dataset and refresh statistics")
    async def overview(self, interaction: discord.Interaction) -> None:
        try:
            await interaction.response.defer(ephemeral=True)
        except discord.NotFound:
            return

        catalog = self.bot.catalog
        refreshes = await self.bot.store.get_recent_refreshes(limit=50)
        completed = sum(1 for r in refreshes if r.status == RefreshStatus.COMPLETED)
        failed = sum(1 for r in refreshes if r.status == RefreshStatus.FAILED)
        snapshots = await self.bot.store.count_snapshots()
        cache_age = catalog.cache.age(catalog.cache_key)

        embed = discord.Embed(
            title="Directory Stats",
            color=discord.Color.green(),
        )
        embed.add_field(name="Listings", value=str(len(catalog.listings)), inline=True)
        embed.add_field(name="Categories", value=str(len(catalog.categories)), inline=True)
        embed.add_field(name="Locations", value=str(len(catalog.locations)), inline=True)
        embed.add_field(name="Source", value=catalog.source.value, inline=True)
        cache_value = f"{cache_age:.0f}s old" if cache_age is not None else "empty"
        embed.add_field(name="Cache", value=cache_value, inline=True)
        embed.add_field(name="Snapshots", value=str(snapshots), inline=True)
        embed.add_field(name="Refreshes OK", value=str(completed), inline=True)
        embed.add_field(name="Refreshes Failed", value=str(failed), inline=True)

        if refreshes:
            last = refreshes[0]
            embed.add_field(
                name="Last Refresh",
                value=f"{last.started_at.strftime('%Y-%m-%d %H:%M')} UTC ({last.status.value})",
                inline=False,
            )
        if catalog.last_error:
            embed.add_field(name="Last Error", value=catalog.last_error[:1024], inline=False)

        await interaction.followup.send(embed=embed)

    @app_commands.command(name="refresh", description="Reload listings from the sheet now")
    @app_commands.describe(drop_snapshot="Discard the saved copy of the sheet first")
    async def refresh(self, interaction: discord.Interaction, drop_snapshot: bool = False) -> None:
        try:
            await interaction.response.defer(ephemeral=True)
        except discord.NotFound:
            return

        listings = await self.bot.catalog.refresh(drop_snapshot=drop_snapshot)
        message = f"Loaded {len(listings)} listings ({self.bot.catalog.source.value})"
        try:
            await interaction.followup.send(message)
        except discord.NotFound:
            pass
