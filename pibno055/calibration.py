"""
BNO055 Calibration
==================

Calibration status, offsets and persistence.

Offset registers only update reliably outside fusion mode, so every access
captures the current mode, forces CONFIG, does its work and restores the
captured mode. The persisted blob is the raw CALIB_BYTECOUNT-byte register
image starting at SIC_MATRIX_0_LSB (0x43), with no header or checksum.

Calibration procedure (automatic on the sensor):
- Gyroscope: keep the sensor still for a few seconds
- Accelerometer: hold still in 6 orientations (each axis up/down)
- Magnetometer: wave in a figure-8 pattern
"""

import logging
from pathlib import Path
from typing import List, Tuple, Union

from .bus import BusHandle
from .data import CalibrationOffsets, CalibrationStatus
from .errors import ProtocolPreconditionError, VerificationError, sequence_step
from .modes import ModeController
from .registers import (
    BNO055_ACC_OFFSET_X_LSB,
    BNO055_CALIB_STAT,
    BNO055_SIC_MATRIX_0_LSB,
    CALIB_APPLY_SETTLE_S,
    CALIB_BYTECOUNT,
    CALIB_LOAD_SETTLE_S,
    OFFSETS_BYTECOUNT,
)

logger = logging.getLogger(__name__)


def _check_blob(blob: bytes, operation: str) -> bytes:
    if len(blob) != CALIB_BYTECOUNT:
        raise ProtocolPreconditionError(
            f"Calibration data must be {CALIB_BYTECOUNT} bytes, got {len(blob)}",
            operation=operation)
    return bytes(blob)


class CalibrationManager:
    """Reads, saves and restores the sensor calibration."""

    def __init__(self, handle: BusHandle, modes: ModeController):
        self.handle = handle
        self.modes = modes

    def read_status(self) -> CalibrationStatus:
        """Read CALIB_STAT. No side effects."""
        status = CalibrationStatus.from_register(self.handle.read_byte(BNO055_CALIB_STAT))
        logger.debug(f"Calibration: sys={status.system}, gyro={status.gyroscope}, "
                     f"accel={status.accelerometer}, mag={status.magnetometer}")
        return status

    def read_offsets(self) -> CalibrationOffsets:
        """
        Read the offset and radius registers (0x55 - 0x6A) in CONFIG mode.

        On failure the device may be left in CONFIG mode.
        """
        with self.modes.config_mode():
            with sequence_step("read_offsets", 1, "burst read offsets"):
                data = self.handle.read_register(BNO055_ACC_OFFSET_X_LSB, OFFSETS_BYTECOUNT)

        offsets = CalibrationOffsets.from_registers(data)
        logger.debug(f"Calibration offsets: {offsets}")
        return offsets

    def save_calibration(self) -> bytes:
        """
        Read the full calibration block for external persistence.

        On failure the device may be left in CONFIG mode.

        Returns:
            CALIB_BYTECOUNT raw register bytes
        """
        with self.modes.config_mode():
            with sequence_step("save_calibration", 1, "burst read calibration block"):
                blob = self.handle.read_register(BNO055_SIC_MATRIX_0_LSB, CALIB_BYTECOUNT)

        logger.info(f"Calibration block read ({len(blob)} bytes)")
        return blob

    def load_calibration(self, blob: bytes):
        """
        Write a calibration block to the sensor and verify it.

        The blob length is checked before any bus I/O. After the write the
        block is read back; every differing byte is collected. The previous
        mode is restored and the fusion engine given 650 ms to re-converge
        before a verification failure is raised.

        Raises:
            ProtocolPreconditionError: wrong blob length, nothing was written
            VerificationError: readback differs; `mismatches` lists each byte
        """
        blob = _check_blob(blob, "load_calibration")

        with self.modes.config_mode():
            self.handle.settle(CALIB_LOAD_SETTLE_S, "CONFIG before calibration write")
            with sequence_step("load_calibration", 1, "burst write calibration block"):
                self.handle.write_register(BNO055_SIC_MATRIX_0_LSB, blob)
            with sequence_step("load_calibration", 2, "burst read back calibration block"):
                readback = self.handle.read_register(BNO055_SIC_MATRIX_0_LSB, CALIB_BYTECOUNT)

        self.handle.settle(CALIB_APPLY_SETTLE_S, "fusion re-converge on new calibration")

        mismatches = self._compare(blob, readback)
        if mismatches:
            detail = ", ".join(f"0x{reg:02X}: wrote 0x{want:02X} read 0x{got:02X}"
                               for reg, want, got in mismatches)
            raise VerificationError(
                f"Calibration load failure at {len(mismatches)} register(s): {detail}",
                register=mismatches[0][0], operation="load_calibration",
                mismatches=mismatches)

        logger.info("Calibration data written to sensor")

    @staticmethod
    def _compare(expected: bytes, actual: bytes) -> List[Tuple[int, int, int]]:
        return [(BNO055_SIC_MATRIX_0_LSB + i, want, got)
                for i, (want, got) in enumerate(zip(expected, actual))
                if want != got]


# =============================================================================
# Calibration Files
# =============================================================================

def write_calibration_file(path: Union[str, Path], blob: bytes) -> Path:
    """Write a raw calibration blob to `path`."""
    blob = _check_blob(blob, "write_calibration_file")
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(blob)
    logger.info(f"Saved BNO055 calibration to {path}")
    return path


def read_calibration_file(path: Union[str, Path]) -> bytes:
    """Read a raw calibration blob from `path`, rejecting any other length."""
    path = Path(path)
    blob = _check_blob(path.read_bytes(), "read_calibration_file")
    logger.info(f"Loaded BNO055 calibration from {path}")
    return blob
