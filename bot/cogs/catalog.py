import logging
from typing import TYPE_CHECKING

import discord
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

from config import settings
from core.catalog import ListingSource

if TYPE_CHECKING:
    from bot.main import DirectoryBot

log = logging.getLogger(__name__)

CONSECUTIVE_FAILURE_THRESHOLD = 3
HEALTH_CHECK_INTERVAL_HOURS = 1


class CatalogCog:
    def __init__(self, bot: "DirectoryBot"):
        self.bot = bot
        self.scheduler = AsyncIOScheduler()
        self._consecutive_failures = 0

    async def start(self) -> None:
        await self._refresh_job()

        self.scheduler.add_job(
            self._refresh_job,
            IntervalTrigger(minutes=settings.refresh_interval_minutes),
            id="catalog_refresh",
            replace_existing=True,
        )

        self.scheduler.add_job(
            self._health_check_job,
            IntervalTrigger(hours=HEALTH_CHECK_INTERVAL_HOURS),
            id="health_check",
            replace_existing=True,
        )

        self.scheduler.start()
        log.info(f"Scheduler started, refreshing every {settings.refresh_interval_minutes}m")

    async def stop(self) -> None:
        self.scheduler.shutdown(wait=False)
        await self.bot.catalog.close()

    async def _refresh_job(self) -> None:
        try:
            listings = await self.bot.catalog.refresh()
        except Exception as e:
            log.exception(f"Catalog refresh crashed: {e}")
            self._consecutive_failures += 1
        else:
            if self.bot.catalog.source == ListingSource.REMOTE:
                self._consecutive_failures = 0
                log.info(f"Catalog refreshed: {len(listings)} listings")
                return
            self._consecutive_failures += 1
            log.warning(
                f"Catalog refresh failed ({self._consecutive_failures} in a row), "
                f"serving {self.bot.catalog.source.value} data"
            )

        if self._consecutive_failures == CONSECUTIVE_FAILURE_THRESHOLD:
            await self._send_health_alert(
                "⚠️ Consecutive Failures",
                f"Sheet refresh failed {self._consecutive_failures} times in a row. "
                f"Last error: {self.bot.catalog.last_error or 'unknown'}",
            )

    async def _health_check_job(self) -> None:
        log.info("Running health check")
        recent_failures = await self.bot.store.get_recent_failures(hours=HEALTH_CHECK_INTERVAL_HOURS)
        if recent_failures >= CONSECUTIVE_FAILURE_THRESHOLD:
            await self._send_health_alert(
                "⚠️ High Failure Rate",
                f"{recent_failures} refresh failures in the last hour. Check logs for details.",
            )

    async def _send_health_alert(self, title: str, message: str) -> None:
        if not settings.discord_admin_user_id:
            log.warning(f"{title}: {message}")
            return
        try:
            user = await self.bot.fetch_user(settings.discord_admin_user_id)
            embed = discord.Embed(
                title=title,
                description=message,
                color=discord.Color.red(),
            )
            await user.send(embed=embed)
        except Exception as e:
            log.error(f"Failed to send health alert: {e}")
