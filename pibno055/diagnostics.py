"""
BNO055 Diagnostics and Reset
============================

Full register-map dump across both pages, and the soft reset.
"""

import logging

from .bus import BusHandle
from .data import RegisterDump
from .errors import sequence_step
from .pages import PageSelector
from .registers import (
    BNO055_SYS_TRIGGER,
    DUMP_ROW_BYTECOUNT,
    DUMP_ROWS_PER_PAGE,
    PAGE_DUMP_SETTLE_S,
    RESET_BOOT_S,
    SYS_TRIGGER_RST_SYS,
)

logger = logging.getLogger(__name__)


class DiagnosticDumper:
    """Reads 0x00 - 0x7F on page 0 and page 1."""

    def __init__(self, handle: BusHandle, pages: PageSelector):
        self.handle = handle
        self.pages = pages

    def _read_page(self, name: str) -> bytes:
        rows = []
        for row in range(DUMP_ROWS_PER_PAGE):
            start = row * DUMP_ROW_BYTECOUNT
            with sequence_step(f"dump {name}", row + 1, f"row 0x{start:02X}"):
                rows.append(self.handle.read_register(start, DUMP_ROW_BYTECOUNT))
        return b"".join(rows)

    def dump(self) -> RegisterDump:
        """Dump both pages. Page 0 is selected again afterwards."""
        page0 = self._read_page("page 0")
        with self.pages.page1(settle_s=PAGE_DUMP_SETTLE_S):
            page1 = self._read_page("page 1")
        return RegisterDump(page0=page0, page1=page1)


class ResetController:
    """Soft reset. Always ends the session."""

    def __init__(self, handle: BusHandle):
        self.handle = handle

    def reset(self):
        """
        Trigger RST_SYS, wait for boot and close the bus handle.

        The sensor comes back in CONFIG mode with default settings. Reopen
        the bus before any further register access.
        """
        try:
            self.handle.write_byte(BNO055_SYS_TRIGGER, SYS_TRIGGER_RST_SYS)
            self.handle.settle(RESET_BOOT_S, "boot after reset")
        finally:
            self.handle.close()
        logger.info("BNO055 sensor reset complete")
