"""
Cooldown Registry
Tracks per-command, per-user cooldowns in memory
"""

import asyncio
import time
from dataclasses import dataclass
from typing import Callable, Dict, Hashable, Optional, Tuple

from utils.logger import get_logger

DEFAULT_COOLDOWN_SECONDS = 3


@dataclass(frozen=True)
class CooldownResult:
    """Outcome of a cooldown check."""

    allowed: bool
    remaining: float = 0.0

    @property
    def throttled(self) -> bool:
        return not self.allowed


ALLOWED = CooldownResult(allowed=True)


class CooldownRegistry:
    """
    In-memory cooldown state keyed by command name, then caller ID.

    Each recorded entry holds the wall-clock instant its cooldown lapses.
    When an event loop is running, every entry schedules its own removal at
    that instant; otherwise stale entries are ignored on the next check and
    can be dropped with sweep().
    """

    def __init__(self, clock: Callable[[], float] = time.time):
        self.logger = get_logger("Cooldowns")
        self.clock = clock
        self._expiries: Dict[str, Dict[Hashable, float]] = {}
        self._timers: Dict[Tuple[str, Hashable], asyncio.TimerHandle] = {}

    def check_and_record(
        self,
        command_name: str,
        caller_id: Hashable,
        cooldown_seconds: float,
        now: Optional[float] = None,
    ) -> CooldownResult:
        """
        Check whether a caller may run a command, recording the use if so.

        Args:
            command_name: Command name
            caller_id: Caller (user) ID
            cooldown_seconds: Cooldown window for the command
            now: Current wall-clock time (default: registry clock)

        Returns:
            ALLOWED, or a throttled result carrying the seconds left
        """
        if now is None:
            now = self.clock()

        timestamps = self._expiries.setdefault(command_name, {})
        expiry = timestamps.get(caller_id)

        if expiry is not None and expiry > now:
            return CooldownResult(allowed=False, remaining=expiry - now)

        expiry = now + cooldown_seconds
        timestamps[caller_id] = expiry
        self._schedule_removal(command_name, caller_id, expiry, cooldown_seconds)
        return ALLOWED

    def _schedule_removal(
        self,
        command_name: str,
        caller_id: Hashable,
        expiry: float,
        delay: float,
    ) -> None:
        key = (command_name, caller_id)
        previous = self._timers.pop(key, None)
        if previous is not None:
            previous.cancel()

        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            # No loop: rely on the lazy expiry check
            return

        self._timers[key] = loop.call_later(delay, self._expire, command_name, caller_id, expiry)

    def _expire(self, command_name: str, caller_id: Hashable, expiry: float) -> None:
        self._timers.pop((command_name, caller_id), None)
        timestamps = self._expiries.get(command_name)
        # Only drop the entry this timer was created for
        if timestamps is not None and timestamps.get(caller_id) == expiry:
            del timestamps[caller_id]

    def sweep(self, now: Optional[float] = None) -> int:
        """
        Remove all expired entries.

        Returns:
            Number of removed entries
        """
        if now is None:
            now = self.clock()

        removed = 0
        for command_name, timestamps in self._expiries.items():
            for caller_id, expiry in list(timestamps.items()):
                if expiry <= now:
                    del timestamps[caller_id]
                    timer = self._timers.pop((command_name, caller_id), None)
                    if timer is not None:
                        timer.cancel()
                    removed += 1

        if removed:
            self.logger.debug(f"Swept {removed} expired cooldowns")
        return removed

    def active_count(self) -> int:
        """Number of (command, caller) pairs currently tracked."""
        return sum(len(timestamps) for timestamps in self._expiries.values())

    def clear(self) -> None:
        """Drop every entry and cancel pending removals."""
        for timer in self._timers.values():
            timer.cancel()
        self._timers.clear()
        self._expiries.clear()
