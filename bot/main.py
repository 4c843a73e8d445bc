import asyncio
import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

import discord
from discord import app_commands

from bot.cogs.catalog import CatalogCog
from bot.commands.search import SearchCommands
from bot.commands.stats import StatsCommands
from config import settings
from core.cache import ResponseCache
from core.catalog import Catalog
from core.session import SearchSession
from core.sheets import SheetsClient
from db.store import SnapshotStore

log_dir = Path("./logs")
log_dir.mkdir(exist_ok=True)

log_format = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
log_level = getattr(logging, settings.log_level.upper(), logging.INFO)

logging.basicConfig(level=log_level, format=log_format)

file_handler = RotatingFileHandler(
    log_dir / "directory-finder.log",
    maxBytes=10 * 1024 * 1024,
    backupCount=5,
    encoding="utf-8",
)
file_handler.setFormatter(logging.Formatter(log_format))
file_handler.setLevel(log_level)
logging.getLogger().addHandler(file_handler)

log = logging.getLogger(__name__)


class DirectoryBot(discord.Client):
    def __init__(self):
        intents = discord.Intents.default()
        super().__init__(intents=intents)
        self.tree = app_commands.CommandTree(self)
        self.store = SnapshotStore()
        self.catalog = Catalog(
            SheetsClient(),
            ResponseCache(ttl_seconds=settings.cache_ttl_seconds),
            self.store,
        )
        self.sessions: dict[int, SearchSession] = {}
        self.catalog_cog: CatalogCog | None = None

    def get_session(self, user_id: int) -> SearchSession:
        if user_id not in self.sessions:
            self.sessions[user_id] = SearchSession()
        return self.sessions[user_id]

    async def setup_hook(self) -> None:
        await self.store.connect()
        log.info("Database connected")

        self.tree.add_command(SearchCommands(self))
        self.tree.add_command(StatsCommands(self))

        self.catalog_cog = CatalogCog(self)
        await self.catalog_cog.start()
        log.info(f"Catalog loaded with {len(self.catalog.listings)} listings")

        await self.tree.sync()
        log.info("Commands synced")

    async def on_ready(self) -> None:
        log.info(f"Logged in as {self.user}")

    async def close(self) -> None:
        if self.catalog_cog:
            await self.catalog_cog.stop()
        await self.store.close()
        await super().close()


async def main() -> None:
    bot = DirectoryBot()
    async with bot:
        await bot.start(settings.discord_bot_token)


def run() -> None:
    asyncio.run(main())


if __name__ == "__main__":
    run()
