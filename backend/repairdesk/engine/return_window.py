"""Return Window - How long after completion a ticket may be returned"""
import re
from datetime import datetime
from typing import Optional

from ..domain.models import ReturnWindowCheck
from ..repositories.settings_repo import SettingsRepository
from ..config.settings import settings
from ..utils.time import whole_days_since
from ..utils.logger import get_logger

logger = get_logger(__name__)

RETURN_WINDOW_SETTING_KEY = "return_window_days"

# Leading integer, so "14 days" and "14.0" both read as 14
LEADING_INT_PATTERN = re.compile(r"^\s*([+-]?\d+)")


class ReturnWindowPolicy:
    """
    Read-only queries used by the return approval flow

    The window comes from the shop settings store; when the stored value
    is missing, has no leading positive integer, or the store is
    unreachable the configured default applies.
    """

    def __init__(
        self,
        settings_repo: Optional[SettingsRepository] = None,
        default_days: Optional[int] = None
    ):
        self._settings_repo = settings_repo if settings_repo is not None else SettingsRepository()
        self._default_days = default_days if default_days is not None else settings.return_window_days

    async def get_return_window_days(self) -> int:
        """Configured return window in days"""
        try:
            raw = await self._settings_repo.get_value(RETURN_WINDOW_SETTING_KEY)
        except Exception as e:
            logger.error(f"Error fetching return window setting: {e}")
            return self._default_days

        if raw is None:
            return self._default_days

        match = LEADING_INT_PATTERN.match(raw)
        if not match:
            logger.warning(f"Ignoring non-numeric return window setting: {raw!r}")
            return self._default_days

        days = int(match.group(1))
        return days if days > 0 else self._default_days

    async def is_within_return_window(
        self,
        completed_at: Optional[datetime],
        now: Optional[datetime] = None
    ) -> ReturnWindowCheck:
        """Check whether a completed ticket is still returnable"""
        if completed_at is None:
            return ReturnWindowCheck(allowed=False, reason="Ticket has no completion date")

        window_days = await self.get_return_window_days()
        days_since_completion = whole_days_since(completed_at, now)

        if days_since_completion > window_days:
            return ReturnWindowCheck(
                allowed=False,
                reason=(
                    f"Return window of {window_days} days has expired. "
                    f"Ticket was completed {days_since_completion} days ago."
                )
            )

        return ReturnWindowCheck(allowed=True)
