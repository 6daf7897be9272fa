"""
Monitoring Utilities
Interaction counters and process metrics
"""

import math
import os
import platform
import time
from typing import Any, Dict, List, Optional


class Monitoring:
    """Interaction counters and process metrics."""

    def __init__(self, client: Optional[Any] = None):
        self.client = client
        self.start_time = time.time()
        self.metrics = {
            "commandsExecuted": 0,
            "commandsThrottled": 0,
            "componentsHandled": 0,
            "interactionErrors": 0,
            "membersJoined": 0,
        }

    def record_command(self) -> None:
        """Record command execution."""
        self.metrics["commandsExecuted"] += 1

    def record_throttle(self) -> None:
        """Record a command rejected by its cooldown."""
        self.metrics["commandsThrottled"] += 1

    def record_component(self) -> None:
        """Record a component interaction handed to a delegate."""
        self.metrics["componentsHandled"] += 1

    def record_error(self) -> None:
        """Record a contained interaction error."""
        self.metrics["interactionErrors"] += 1

    def record_member_join(self) -> None:
        self.metrics["membersJoined"] += 1

    def get_system_metrics(self) -> Dict[str, Any]:
        """
        Get system metrics.

        Returns:
            Dict with memory, CPU, uptime, and platform info
        """
        import psutil

        process = psutil.Process()
        memory_info = process.memory_info()
        load_avg = os.getloadavg() if hasattr(os, "getloadavg") else (0.0, 0.0, 0.0)

        return {
            "memory": {
                "used": round(memory_info.rss / 1024 / 1024),
                "systemTotal": round(psutil.virtual_memory().total / 1024 / 1024),
            },
            "cpu": {
                "loadAvg1m": round(load_avg[0], 2),
                "cores": psutil.cpu_count(),
            },
            "uptime": {
                "process": self.format_duration(int(time.time() - process.create_time())),
                "bot": self.format_duration(int(time.time() - self.start_time)),
            },
            "platform": {
                "python": platform.python_version(),
                "os": f"{platform.system()} {platform.release()}",
            },
        }

    def get_discord_metrics(self) -> Dict[str, Any]:
        """
        Get Discord client metrics.

        Returns:
            Dict with ping and guild count
        """
        if self.client is None:
            return {"ping": 0.0, "guilds": 0}

        latency = getattr(self.client, "latency", 0.0)
        # nan until the first heartbeat
        ping = latency * 1000 if math.isfinite(latency) else 0.0
        return {
            "ping": round(ping, 1),
            "guilds": len(getattr(self.client, "guilds", [])),
        }

    def get_app_metrics(self) -> Dict[str, Any]:
        return dict(self.metrics)

    @staticmethod
    def format_duration(seconds: int) -> str:
        """
        Format duration in human readable format.

        Args:
            seconds: Duration in seconds

        Returns:
            Formatted duration string
        """
        days = seconds // 86400
        hours = (seconds % 86400) // 3600
        mins = (seconds % 3600) // 60
        secs = seconds % 60

        parts: List[str] = []
        if days > 0:
            parts.append(f"{days}d")
        if hours > 0:
            parts.append(f"{hours}h")
        if mins > 0:
            parts.append(f"{mins}m")
        if secs > 0 or not parts:
            parts.append(f"{secs}s")

        return " ".join(parts)

    def get_full_status(self) -> Dict[str, Any]:
        """
        Get full status report.

        Returns:
            Dict with system, discord, and app metrics
        """
        return {
            "system": self.get_system_metrics(),
            "discord": self.get_discord_metrics(),
            "app": self.get_app_metrics(),
        }
