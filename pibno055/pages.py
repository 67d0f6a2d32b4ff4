"""
BNO055 Register Page Selection
==============================

The sensor's register space has two pages. Page 1 holds the raw sensor
configuration registers; everything else lives on page 0. Leaving the
device on page 1 corrupts every later register access in the session, so
all page-1 work goes through `PageSelector.page1()`, which puts page 0 back
on every exit path.
"""

import logging
from contextlib import contextmanager
from typing import Iterator

from .bus import BusHandle
from .errors import BNO055Error
from .registers import BNO055_PAGE_ID, RegisterPage

logger = logging.getLogger(__name__)


class PageSelector:
    """Switches the PAGE_ID register."""

    def __init__(self, handle: BusHandle):
        self.handle = handle

    def select(self, page: RegisterPage):
        """Write PAGE_ID. Page switches take effect immediately."""
        logger.debug(f"Select register page {int(page)}")
        self.handle.write_byte(BNO055_PAGE_ID, int(page))

    @contextmanager
    def page1(self, settle_s: float = 0.0) -> Iterator['PageSelector']:
        """
        Run a block with page 1 selected, restoring page 0 afterwards.

        Args:
            settle_s: optional wait after each page switch

        If the block (or the switch to page 1) raises, page 0 is still
        restored before the original error propagates. A restore failure on
        that path is logged; the original error wins.
        """
        try:
            self.select(RegisterPage.PAGE1)
            if settle_s:
                self.handle.settle(settle_s, "page 1 select")
            yield self
        except BaseException:
            self._restore_after_error()
            raise

        self.select(RegisterPage.PAGE0)
        if settle_s:
            self.handle.settle(settle_s, "page 0 restore")

    def _restore_after_error(self):
        try:
            self.select(RegisterPage.PAGE0)
        except BNO055Error as e:
            logger.warning(f"Failed to restore register page 0: {e}")
