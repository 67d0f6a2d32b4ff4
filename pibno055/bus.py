"""
BNO055 Bus Access
=================

Opens the I2C channel, binds the sensor address and provides the primitive
register transactions every other component is built on.

A register read is two bus operations: a one-byte write of the register
address, then a read of N bytes. Both go through smbus2's i2c_rdwr so that
bursts longer than the 32-byte SMBus block limit (the 34-byte calibration
block) work the same way as single registers.

Requirements:
- smbus2: pip install smbus2
- I2C enabled on Pi: sudo raspi-config -> Interface Options -> I2C
"""

import fcntl
import logging
import time
from typing import Optional, Union

import smbus2

from .errors import ProtocolPreconditionError, RegisterIOError, TransportError
from .registers import (
    BNO055_CHIP_ID,
    BNO055_CHIP_ID_VALUE,
    VALID_ADDRESSES,
)

logger = logging.getLogger(__name__)

# <linux/i2c-dev.h>
I2C_SLAVE = 0x0703


class BusHandle:
    """
    An open, addressed I2C channel to one BNO055.

    This is the session object shared by all driver components. It holds no
    device state beyond the channel itself and is not thread-safe: only one
    caller may drive the device at a time.
    """

    def __init__(self, bus: 'smbus2.SMBus', address: int, bus_path: Union[str, int] = ""):
        self._bus: Optional['smbus2.SMBus'] = bus
        self.address = address
        self.bus_path = bus_path

    def __repr__(self) -> str:
        state = "closed" if self.closed else "open"
        return f"BusHandle({self.bus_path!r}, 0x{self.address:02X}, {state})"

    @property
    def closed(self) -> bool:
        return self._bus is None

    def _transfer(self, msg: 'smbus2.i2c_msg', register: int, what: str):
        if self._bus is None:
            raise TransportError("Bus handle is closed", register=register, operation=what)
        try:
            self._bus.i2c_rdwr(msg)
        except OSError as e:
            raise RegisterIOError(f"I2C {what} failure: {e}", register=register,
                                  operation=what) from e

    def select_register(self, register: int):
        """Point the device's register address at `register`."""
        self._transfer(smbus2.i2c_msg.write(self.address, [register & 0xFF]),
                       register, "write")

    def read_register(self, register: int, count: int) -> bytes:
        """
        Burst-read `count` bytes starting at `register`.

        If the address write fails the read is not attempted.
        """
        self.select_register(register)
        msg = smbus2.i2c_msg.read(self.address, count)
        self._transfer(msg, register, "read")
        data = bytes(msg)
        if len(data) != count:
            raise RegisterIOError(f"Short read: {len(data)}/{count} bytes",
                                  register=register, operation="read")
        logger.debug(f"I2C read {count} bytes at 0x{register:02X}: {data.hex(' ')}")
        return data

    def write_register(self, register: int, data: bytes):
        """Burst-write `data` to consecutive registers starting at `register`."""
        payload = [register & 0xFF] + list(data)
        logger.debug(f"I2C write {bytes(data).hex(' ')} to 0x{register:02X}")
        self._transfer(smbus2.i2c_msg.write(self.address, payload), register, "write")

    def read_byte(self, register: int) -> int:
        """Read a single register."""
        return self.read_register(register, 1)[0]

    def write_byte(self, register: int, value: int):
        """Write a single register."""
        self.write_register(register, bytes([value & 0xFF]))

    def settle(self, seconds: float, reason: str):
        """Blocking wait for a hardware settle time."""
        logger.debug(f"Settle {seconds * 1000:.0f} ms: {reason}")
        time.sleep(seconds)

    def close(self):
        """Close the I2C channel. Further register access raises TransportError."""
        if self._bus is None:
            return
        bus, self._bus = self._bus, None
        bus.close()
        logger.info(f"Closed I2C bus {self.bus_path} (0x{self.address:02X})")

    def __enter__(self) -> 'BusHandle':
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()


def open_bus(bus_path: Union[str, int], address: int) -> BusHandle:
    """
    Open the I2C channel, bind the sensor address and probe the chip ID.

    Args:
        bus_path: I2C device path (/dev/i2c-1) or bus number
        address: 7-bit sensor address (0x28 or 0x29)

    Returns:
        An open BusHandle

    Raises:
        ProtocolPreconditionError: address is not a BNO055 address
        TransportError: open, bind or probe failed; the channel is closed again
    """
    if address not in VALID_ADDRESSES:
        raise ProtocolPreconditionError(
            f"Invalid BNO055 address 0x{address:02X}, expected 0x28 or 0x29",
            operation="open")

    try:
        bus = smbus2.SMBus(bus_path)
    except OSError as e:
        raise TransportError(f"Failed to open I2C bus [{bus_path}]: {e}",
                             operation="open") from e

    logger.debug(f"I2C bus device: [{bus_path}]")

    try:
        fcntl.ioctl(bus.fd, I2C_SLAVE, address)
    except OSError as e:
        bus.close()
        raise TransportError(f"Can't bind sensor address 0x{address:02X}: {e}",
                             operation="bind") from e

    handle = BusHandle(bus, address, bus_path)

    try:
        chip_id = handle.read_byte(BNO055_CHIP_ID)
    except RegisterIOError as e:
        handle.close()
        raise TransportError(
            f"No response from sensor at 0x{address:02X}",
            register=BNO055_CHIP_ID, operation="probe") from e

    if chip_id != BNO055_CHIP_ID_VALUE:
        handle.close()
        raise TransportError(
            f"BNO055 not found at 0x{address:02X}: CHIP_ID = 0x{chip_id:02X}, "
            f"expected 0x{BNO055_CHIP_ID_VALUE:02X}",
            register=BNO055_CHIP_ID, operation="probe")

    logger.info(f"BNO055 found on {bus_path} at 0x{address:02X}")
    return handle
