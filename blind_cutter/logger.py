# blind_cutter/logger.py
# Cut-plan diagnostics with a "[CUT]" prefix:
#   info   per fabric group sheet summary, bar piece totals (stdout)
#   warn   dropped oversized panels, missing roll lengths, stock shortages (stderr)
#   error  panel/free-rectangle ceilings hit, orders that cannot be cut (stderr, always on)
# --quiet in the runner switches info/warn off.

from __future__ import annotations

import sys
from dataclasses import dataclass


@dataclass
class Logger:
    enabled: bool = True
    prefix: str = "[CUT]"

    def info(self, msg: str) -> None:
        if self.enabled:
            print(f"{self.prefix} {msg}", file=sys.stdout)

    def warn(self, msg: str) -> None:
        if self.enabled:
            print(f"{self.prefix} WARNING: {msg}", file=sys.stderr)

    def error(self, msg: str) -> None:
        print(f"{self.prefix} ERROR: {msg}", file=sys.stderr)


# Global default logger
LOGGER = Logger(enabled=True)


def set_enabled(flag: bool) -> None:
    LOGGER.enabled = bool(flag)


def get_logger() -> Logger:
    return LOGGER
