"""
BNO055 Session Configuration
============================

Connection and start-up settings, loadable from a JSON file:

    {
        "bus_path": "/dev/i2c-1",
        "address": "0x28",
        "operation_mode": "NDOF_FMC",
        "power_mode": "NORMAL",
        "calibration_file": "/etc/bno055/calibration.bin"
    }

Modes may be given by name or register code. Unset modes leave the device
as it is.
"""

import json
import logging
from dataclasses import dataclass
from enum import IntEnum
from pathlib import Path
from typing import Optional, Type, Union

from .errors import ProtocolPreconditionError
from .registers import BNO055_ADDR_LOW, DEFAULT_BUS_PATH, OperationMode, PowerMode

logger = logging.getLogger(__name__)


def parse_enum(enum_cls: Type[IntEnum], value):
    """Accept an enum member, its name (any case) or its integer code."""
    if value is None or isinstance(value, enum_cls):
        return value
    try:
        if isinstance(value, str):
            text = value.strip()
            if text.upper() in enum_cls.__members__:
                return enum_cls[text.upper()]
            return enum_cls(int(text, 0))
        return enum_cls(value)
    except ValueError:
        raise ProtocolPreconditionError(
            f"Unknown {enum_cls.__name__} {value!r}, expected one of "
            f"{', '.join(enum_cls.__members__)}") from None


def parse_address(value) -> int:
    """Accept 0x28, 40 or '0x28'."""
    if isinstance(value, str):
        try:
            return int(value, 16)
        except ValueError:
            raise ProtocolPreconditionError(f"Invalid I2C address {value!r}") from None
    return int(value)


@dataclass
class BNO055Config:
    """Configuration for a BNO055 session."""
    bus_path: Union[str, int] = DEFAULT_BUS_PATH
    address: int = BNO055_ADDR_LOW

    # Applied after connect, in this order: calibration, mode, power
    calibration_file: Optional[str] = None
    operation_mode: Optional[OperationMode] = None
    power_mode: Optional[PowerMode] = None

    def __post_init__(self):
        self.address = parse_address(self.address)
        self.operation_mode = parse_enum(OperationMode, self.operation_mode)
        self.power_mode = parse_enum(PowerMode, self.power_mode)

    @classmethod
    def from_dict(cls, data: dict) -> 'BNO055Config':
        """Create from dictionary; unknown keys are ignored with a warning."""
        known = {k: v for k, v in data.items() if k in cls.__dataclass_fields__}
        for key in sorted(set(data) - set(known)):
            logger.warning(f"Ignoring unknown config key '{key}'")
        return cls(**known)

    @classmethod
    def load(cls, path: Union[str, Path]) -> 'BNO055Config':
        """Load configuration from a JSON file."""
        path = Path(path)
        with open(path, 'r') as f:
            data = json.load(f)
        logger.info(f"Loaded BNO055 config from {path}")
        return cls.from_dict(data)

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "bus_path": self.bus_path,
            "address": f"0x{self.address:02X}",
            "calibration_file": self.calibration_file,
            "operation_mode": self.operation_mode.name if self.operation_mode is not None else None,
            "power_mode": self.power_mode.name if self.power_mode is not None else None,
        }
