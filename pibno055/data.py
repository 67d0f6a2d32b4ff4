"""
BNO055 Data Types
=================

Typed results returned by the driver components. Sensor samples are
frozen so a reading cannot be mutated after it was decoded.
"""

from dataclasses import dataclass, astuple
from typing import List, Tuple

import numpy as np

from .fields import (
    accel_unit_factor,
    accel_unit_is_mg,
    calib_stat_fields,
    decode_int16_le,
    euler_unit_is_radians,
    gyro_unit_is_rps,
    orientation_is_android,
    temp_unit_is_fahrenheit,
)
from .registers import (
    DUMP_ROW_BYTECOUNT,
    OFFSETS_BYTECOUNT,
    OperationMode,
    PowerMode,
    SELF_TEST_ALL_PASSED,
)


# =============================================================================
# Sensor Samples
# =============================================================================

class _Sample:
    """Mixin giving samples a numpy view."""

    def as_array(self) -> np.ndarray:
        return np.array(astuple(self), dtype=np.float64)


@dataclass(frozen=True)
class Acceleration(_Sample):
    """Raw accelerometer LSB; scaling depends on UNIT_SEL and range."""
    x: float
    y: float
    z: float


@dataclass(frozen=True)
class Magnetometer(_Sample):
    """Magnetic field in microtesla."""
    x: float
    y: float
    z: float


@dataclass(frozen=True)
class Gyroscope(_Sample):
    """Angular rate in deg/s."""
    x: float
    y: float
    z: float


@dataclass(frozen=True)
class Euler(_Sample):
    """Orientation in degrees."""
    heading: float
    roll: float
    pitch: float


@dataclass(frozen=True)
class Quaternion(_Sample):
    """Unit quaternion."""
    w: float
    x: float
    y: float
    z: float


@dataclass(frozen=True)
class Gravity(_Sample):
    """Gravity vector in m/s² or mg, per UNIT_SEL bit 0."""
    x: float
    y: float
    z: float


@dataclass(frozen=True)
class LinearAcceleration(_Sample):
    """Acceleration with gravity removed, in m/s² or mg."""
    x: float
    y: float
    z: float


# =============================================================================
# Calibration
# =============================================================================

@dataclass(frozen=True)
class CalibrationStatus:
    """CALIB_STAT fields, 0-3 each, 3 = fully calibrated."""
    system: int = 0
    gyroscope: int = 0
    accelerometer: int = 0
    magnetometer: int = 0

    @classmethod
    def from_register(cls, value: int) -> 'CalibrationStatus':
        return cls(*calib_stat_fields(value))

    @property
    def is_fully_calibrated(self) -> bool:
        return (self.system == 3 and self.gyroscope == 3
                and self.accelerometer == 3 and self.magnetometer == 3)


@dataclass(frozen=True)
class CalibrationOffsets:
    """
    Calibration offset register image (0x55 - 0x6A).

    Accelerometer offsets range with the G-range (+/-2000 at 2G up to
    +/-16000 at 16G), magnetometer offsets +/-6400, gyroscope offsets with
    the dps range. Radii are +/-1000 (accel) and +/-960 (mag).
    """
    accel: Tuple[int, int, int]
    mag: Tuple[int, int, int]
    gyro: Tuple[int, int, int]
    accel_radius: int
    mag_radius: int

    @classmethod
    def from_registers(cls, data: bytes) -> 'CalibrationOffsets':
        if len(data) != OFFSETS_BYTECOUNT:
            raise ValueError(f"Offset block must be {OFFSETS_BYTECOUNT} bytes, got {len(data)}")
        v = [int(x) for x in decode_int16_le(data)]
        return cls(
            accel=(v[0], v[1], v[2]),
            mag=(v[3], v[4], v[5]),
            gyro=(v[6], v[7], v[8]),
            accel_radius=v[9],
            mag_radius=v[10],
        )


# =============================================================================
# Device Information
# =============================================================================

@dataclass(frozen=True)
class UnitSelection:
    """Decoded UNIT_SEL register."""
    raw: int = 0

    @property
    def accel_mg(self) -> bool:
        return accel_unit_is_mg(self.raw)

    @property
    def accel_factor(self) -> float:
        return accel_unit_factor(self.raw)

    @property
    def gyro_rps(self) -> bool:
        return gyro_unit_is_rps(self.raw)

    @property
    def euler_radians(self) -> bool:
        return euler_unit_is_radians(self.raw)

    @property
    def temp_fahrenheit(self) -> bool:
        return temp_unit_is_fahrenheit(self.raw)

    @property
    def android_orientation(self) -> bool:
        return orientation_is_android(self.raw)


@dataclass(frozen=True)
class DeviceInfo:
    """Identity, revision and live state registers."""
    chip_id: int
    accel_id: int
    mag_id: int
    gyro_id: int
    software_revision: int
    bootloader_revision: int
    operation_mode: OperationMode
    power_mode: PowerMode
    remap_config: int
    remap_sign: int
    system_status: int
    self_test: int
    system_error: int
    units: UnitSelection
    temperature: int

    @property
    def self_test_passed(self) -> bool:
        return self.self_test == SELF_TEST_ALL_PASSED


# =============================================================================
# Page 1 Sensor Configuration
# =============================================================================

@dataclass(frozen=True)
class AccelConfig:
    """Accelerometer configuration codes (page 1)."""
    g_range: int
    bandwidth: int
    power_mode: int
    sleep_mode: int
    sleep_duration: int


@dataclass(frozen=True)
class MagConfig:
    """Magnetometer configuration codes (page 1)."""
    data_rate: int
    operation_mode: int
    power_mode: int


@dataclass(frozen=True)
class GyroConfig:
    """Gyroscope configuration codes (page 1)."""
    dps_range: int
    bandwidth: int
    power_mode: int


# =============================================================================
# Register Dump
# =============================================================================

@dataclass(frozen=True)
class RegisterDump:
    """Raw register contents of both pages, 128 bytes each."""
    page0: bytes
    page1: bytes

    @staticmethod
    def rows(page: bytes) -> List[Tuple[int, bytes]]:
        """Split a page into (start register, 16 bytes) rows."""
        return [(i, page[i:i + DUMP_ROW_BYTECOUNT])
                for i in range(0, len(page), DUMP_ROW_BYTECOUNT)]

    def format(self) -> str:
        """Hex table of both pages."""
        rule = "-" * 54
        header = " reg    " + "  ".join(f"{i:X}" for i in range(DUMP_ROW_BYTECOUNT))
        lines = []
        for name, page in (("page-0", self.page0), ("page-1", self.page1)):
            lines += [rule, f"BNO055 {name}:", rule, header, rule]
            for start, row in self.rows(page):
                lines.append(f"[0x{start:02X}] " + " ".join(f"{b:02X}" for b in row))
        return "\n".join(lines)
