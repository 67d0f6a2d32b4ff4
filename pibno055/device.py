"""
BNO055 Session
==============

One open sensor with all driver components wired to the same bus handle.

Usage:
    with BNO055.open("/dev/i2c-1", 0x28) as bno:
        bno.modes.set_mode(OperationMode.NDOF_FMC)
        print(bno.sensors.read_euler())
        print(bno.calibration.read_status())
"""

import logging
from pathlib import Path
from typing import Union

from .bus import BusHandle, open_bus
from .calibration import (
    CalibrationManager,
    read_calibration_file,
    write_calibration_file,
)
from .config import BNO055Config
from .diagnostics import DiagnosticDumper, ResetController
from .errors import BNO055Error
from .modes import ModeController
from .pages import PageSelector
from .registers import BNO055_ADDR_LOW, DEFAULT_BUS_PATH
from .sensors import SensorReader

logger = logging.getLogger(__name__)


class BNO055:
    """
    Session facade over one BusHandle.

    Attributes:
        handle: the shared bus handle
        pages: PageSelector
        modes: ModeController
        calibration: CalibrationManager
        sensors: SensorReader
        diagnostics: DiagnosticDumper
    """

    def __init__(self, handle: BusHandle):
        self.handle = handle
        self.pages = PageSelector(handle)
        self.modes = ModeController(handle)
        self.calibration = CalibrationManager(handle, self.modes)
        self.sensors = SensorReader(handle, self.modes, self.pages)
        self.diagnostics = DiagnosticDumper(handle, self.pages)
        self._resetter = ResetController(handle)

    @classmethod
    def open(cls, bus_path: Union[str, int] = DEFAULT_BUS_PATH,
             address: int = BNO055_ADDR_LOW) -> 'BNO055':
        """Open and probe the sensor."""
        return cls(open_bus(bus_path, address))

    @classmethod
    def from_config(cls, config: BNO055Config) -> 'BNO055':
        """
        Open the sensor and apply the configured calibration file, operation
        mode and power mode. The bus is closed again if any step fails.
        """
        bno = cls.open(config.bus_path, config.address)
        try:
            if config.calibration_file:
                bno.load_calibration_file(config.calibration_file)
            if config.operation_mode is not None:
                bno.modes.set_mode(config.operation_mode)
            if config.power_mode is not None:
                bno.modes.set_power(config.power_mode)
        except (BNO055Error, OSError):
            bno.close()
            raise
        return bno

    def save_calibration_file(self, path: Union[str, Path]) -> Path:
        """Read the calibration block from the sensor and write it to `path`."""
        return write_calibration_file(path, self.calibration.save_calibration())

    def load_calibration_file(self, path: Union[str, Path]):
        """Read a calibration file and write it to the sensor."""
        self.calibration.load_calibration(read_calibration_file(path))

    def reset(self):
        """Soft-reset the sensor. The session is closed afterwards."""
        self._resetter.reset()

    @property
    def closed(self) -> bool:
        return self.handle.closed

    def close(self):
        self.handle.close()

    def __enter__(self) -> 'BNO055':
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
