"""Process diagnostics reported by the detailed health check."""

import platform
import resource
import sys
import time
from typing import Dict, Protocol


_PROCESS_START = time.monotonic()


class SystemInfo(Protocol):
    """Source of process-level diagnostics."""

    def get_uptime(self) -> float: ...

    def get_memory_usage(self) -> Dict[str, int]: ...

    def get_python_version(self) -> str: ...


class ProcessSystemInfo:
    """Diagnostics of the running interpreter process."""

    def get_uptime(self) -> float:
        """Seconds since this module was imported."""
        return round(time.monotonic() - _PROCESS_START, 3)

    def get_memory_usage(self) -> Dict[str, int]:
        """Peak resident set size in bytes."""
        max_rss = resource.getrusage(resource.RUSAGE_SELF).ru_maxrss
        # Linux reports kilobytes, macOS bytes
        if sys.platform != "darwin":
            max_rss *= 1024
        return {"maxRss": max_rss}

    def get_python_version(self) -> str:
        return platform.python_version()
