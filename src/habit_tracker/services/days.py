"""Day detail lookup with per-day markdown files."""

import logging
import re
from dataclasses import dataclass

from habit_tracker.domain.days import DayDetail
from habit_tracker.domain.errors import NetworkError
from habit_tracker.domain.records import Level
from habit_tracker.services.records import RecordStore
from habit_tracker.services.sources import StaticFiles

logger = logging.getLogger(__name__)

_FRONTMATTER = re.compile(r"^---[\s\S]*?---\n*")


def strip_frontmatter(markdown: str) -> str:
    """Remove a leading ``---`` frontmatter block."""
    return _FRONTMATTER.sub("", markdown, count=1)


@dataclass
class DayDetailService:
    """Builds the detail view for a single day."""

    store: RecordStore
    static_files: StaticFiles

    async def get_day(self, date_key: str) -> DayDetail:
        """Return the day's record with its markdown body."""
        record = self.store.get(date_key)
        if record is None or record.level == Level.NONE:
            return DayDetail(date=date_key, level=Level.NONE, title=None, content=None)

        content = record.content or None
        try:
            markdown = await self.static_files.fetch_day_markdown(date_key)
        except NetworkError:
            logger.warning("Could not load markdown for %s", date_key, exc_info=True)
            markdown = None
        if markdown is not None:
            content = strip_frontmatter(markdown)
        return DayDetail(
            date=date_key, level=record.level, title=record.title, content=content
        )
