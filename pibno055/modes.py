"""
BNO055 Mode Control
===================

Operating-mode and power-mode state machines.

The device cannot switch directly between two non-CONFIG modes: control
registers only latch from CONFIG, so A -> B always runs A -> CONFIG -> B.
Settle times differ by direction:

    any -> CONFIG    10 ms
    CONFIG -> any    25 ms
    power mode       30 ms per write (CONFIG entry, power write, mode restore)

Every transition is verified by reading the register back. A mismatch
raises VerificationError; transport failures raise RegisterIOError. After
a failure the device may be left in CONFIG mode.
"""

import logging
from contextlib import contextmanager
from typing import Iterator

from .bus import BusHandle
from .errors import ProtocolPreconditionError, VerificationError, sequence_step
from .fields import opr_mode_bits, pwr_mode_bits
from .registers import (
    BNO055_OPR_MODE,
    BNO055_PWR_MODE,
    MODE_FROM_CONFIG_SETTLE_S,
    MODE_TO_CONFIG_SETTLE_S,
    POWER_MODE_SETTLE_S,
    REMAP_CONFIG_VALUES,
    REMAP_SIGN_MAX,
    OperationMode,
    PowerMode,
    RemapKind,
)

logger = logging.getLogger(__name__)


def _as_mode(mode) -> OperationMode:
    try:
        return OperationMode(mode)
    except ValueError:
        raise ProtocolPreconditionError(f"Unknown operation mode {mode!r}") from None


def _as_power(mode) -> PowerMode:
    try:
        return PowerMode(mode)
    except ValueError:
        raise ProtocolPreconditionError(f"Unknown power mode {mode!r}") from None


def _as_remap_kind(kind) -> RemapKind:
    try:
        return RemapKind(kind)
    except ValueError:
        raise ProtocolPreconditionError(f"Unsupported remap kind {kind!r}") from None


class ModeController:
    """Reads, writes and verifies OPR_MODE, PWR_MODE and the axis remap."""

    def __init__(self, handle: BusHandle):
        self.handle = handle

    # -------------------------------------------------------------------------
    # Operation mode
    # -------------------------------------------------------------------------

    def get_mode(self) -> OperationMode:
        """Read OPR_MODE (bits 0-3)."""
        code = opr_mode_bits(self.handle.read_byte(BNO055_OPR_MODE))
        try:
            mode = OperationMode(code)
        except ValueError:
            raise VerificationError(f"Unrecognized operation mode 0x{code:02X}",
                                    register=BNO055_OPR_MODE,
                                    operation="get_mode") from None
        logger.debug(f"Operation mode: {mode.name}")
        return mode

    def _write_mode(self, mode: OperationMode):
        self.handle.write_byte(BNO055_OPR_MODE, int(mode))
        if mode == OperationMode.CONFIG:
            self.handle.settle(MODE_TO_CONFIG_SETTLE_S, "any -> CONFIG")
        else:
            self.handle.settle(MODE_FROM_CONFIG_SETTLE_S, f"CONFIG -> {mode.name}")

    def set_mode(self, mode) -> OperationMode:
        """
        Switch the operating mode, passing through CONFIG when required.

        Requesting the current mode issues no writes.

        Returns:
            The verified new mode
        """
        new_mode = _as_mode(mode)

        with sequence_step("set_mode", 1, "read current mode"):
            old_mode = self.get_mode()

        if old_mode == new_mode:
            return new_mode

        if old_mode != OperationMode.CONFIG and new_mode != OperationMode.CONFIG:
            with sequence_step("set_mode", 2, "enter CONFIG"):
                self._write_mode(OperationMode.CONFIG)

        with sequence_step("set_mode", 3, f"write {new_mode.name}"):
            self._write_mode(new_mode)

        with sequence_step("set_mode", 4, "verify mode"):
            current = self.get_mode()
            if current != new_mode:
                raise VerificationError(
                    f"Mode readback {current.name}, requested {new_mode.name}",
                    register=BNO055_OPR_MODE, operation="set_mode")

        logger.info(f"Operation mode {old_mode.name} -> {new_mode.name}")
        return new_mode

    @contextmanager
    def config_mode(self) -> Iterator[OperationMode]:
        """
        Run a block in CONFIG mode and restore the previous mode afterwards.

        Yields the captured previous mode. If the block raises, the previous
        mode is not restored and the device stays in CONFIG.
        """
        with sequence_step("config_mode", 1, "capture mode"):
            old_mode = self.get_mode()
        with sequence_step("config_mode", 2, "force CONFIG"):
            self.set_mode(OperationMode.CONFIG)
        yield old_mode
        with sequence_step("config_mode", 3, f"restore {old_mode.name}"):
            self.set_mode(old_mode)

    # -------------------------------------------------------------------------
    # Power mode
    # -------------------------------------------------------------------------

    def get_power(self) -> PowerMode:
        """Read PWR_MODE (bits 0-1)."""
        code = pwr_mode_bits(self.handle.read_byte(BNO055_PWR_MODE))
        try:
            power = PowerMode(code)
        except ValueError:
            raise VerificationError(f"Unrecognized power mode 0x{code:02X}",
                                    register=BNO055_PWR_MODE,
                                    operation="get_power") from None
        logger.debug(f"Power mode: {power.name}")
        return power

    def set_power(self, power) -> PowerMode:
        """
        Set the power mode. PWR_MODE only latches in CONFIG, so a device in
        any other mode is switched to CONFIG and back around the write.

        Returns:
            The verified new power mode
        """
        new_power = _as_power(power)

        with sequence_step("set_power", 1, "read current mode"):
            old_mode = self.get_mode()

        if old_mode != OperationMode.CONFIG:
            with sequence_step("set_power", 2, "enter CONFIG"):
                self.handle.write_byte(BNO055_OPR_MODE, int(OperationMode.CONFIG))
                self.handle.settle(POWER_MODE_SETTLE_S, "any -> CONFIG for power mode")

        with sequence_step("set_power", 3, f"write {new_power.name}"):
            self.handle.write_byte(BNO055_PWR_MODE, int(new_power))
            self.handle.settle(POWER_MODE_SETTLE_S, "power mode write")

        if old_mode != OperationMode.CONFIG:
            with sequence_step("set_power", 4, f"restore {old_mode.name}"):
                self.handle.write_byte(BNO055_OPR_MODE, int(old_mode))
                self.handle.settle(POWER_MODE_SETTLE_S, f"CONFIG -> {old_mode.name}")

        with sequence_step("set_power", 5, "verify power mode"):
            current = self.get_power()
            if current != new_power:
                raise VerificationError(
                    f"Power mode readback {current.name}, requested {new_power.name}",
                    register=BNO055_PWR_MODE, operation="set_power")

        logger.info(f"Power mode set to {new_power.name}")
        return new_power

    # -------------------------------------------------------------------------
    # Axis remap
    # -------------------------------------------------------------------------

    def get_remap(self, kind) -> int:
        """Read AXIS_MAP_CONFIG (RemapKind.CONFIG) or AXIS_MAP_SIGN (RemapKind.SIGN)."""
        register = int(_as_remap_kind(kind))
        value = self.handle.read_byte(register)
        logger.debug(f"Axis remap 0x{register:02X}: 0x{value:02X}")
        return value

    def set_remap(self, kind, value: int):
        """
        Write an axis remap register in CONFIG mode and verify it.

        Valid AXIS_MAP_CONFIG values are 0x24, 0x18, 0x09 and 0x36;
        AXIS_MAP_SIGN takes 0-7 (bit 2 = X, bit 1 = Y, bit 0 = Z negated).
        """
        kind = _as_remap_kind(kind)
        if kind == RemapKind.CONFIG and value not in REMAP_CONFIG_VALUES:
            raise ProtocolPreconditionError(
                f"Unsupported axis remap config 0x{value:02X}",
                register=int(kind), operation="set_remap")
        if kind == RemapKind.SIGN and not 0 <= value <= REMAP_SIGN_MAX:
            raise ProtocolPreconditionError(
                f"Unsupported axis remap sign 0x{value:02X}",
                register=int(kind), operation="set_remap")

        with self.config_mode():
            with sequence_step("set_remap", 1, "write remap"):
                self.handle.write_byte(int(kind), value)
            with sequence_step("set_remap", 2, "verify remap"):
                current = self.handle.read_byte(int(kind))
                if current != value:
                    raise VerificationError(
                        f"Axis remap readback 0x{current:02X}, requested 0x{value:02X}",
                        register=int(kind), operation="set_remap")

        logger.info(f"Axis remap {kind.name} set to 0x{value:02X}")
