"""
Shared test fixtures for BNO055 driver tests.

The fake bus speaks smbus2's i2c_rdwr with real i2c_msg objects and models
just enough of the sensor to exercise the driver: two register pages, an
auto-incrementing register pointer, control registers that only latch in
CONFIG mode, and injectable bus faults. Every transaction and every settle
sleep lands in one ordered event log.
"""

import ctypes
from unittest.mock import patch

import pytest

from pibno055.bus import BusHandle
from pibno055.device import BNO055
from pibno055.registers import (
    BNO055_ACC_CONFIG,
    BNO055_ACC_ID,
    BNO055_AXIS_MAP_CONFIG,
    BNO055_AXIS_MAP_SIGN,
    BNO055_BL_REV_ID,
    BNO055_CHIP_ID,
    BNO055_GYR_CONFIG_0,
    BNO055_GYR_ID,
    BNO055_MAG_CONFIG,
    BNO055_MAG_ID,
    BNO055_MAG_RADIUS_LSB,
    BNO055_OPR_MODE,
    BNO055_PAGE_ID,
    BNO055_PWR_MODE,
    BNO055_SIC_MATRIX_0_LSB,
    BNO055_ST_RESULT,
    BNO055_SW_REV_ID_LSB,
    BNO055_TEMP,
    BNO055_UNIT_SEL,
)

I2C_M_RD = 0x0001
PAGE_SIZE = 0x80

# Registers that ignore writes unless OPR_MODE is CONFIG
CONFIG_ONLY_REGISTERS = frozenset(
    [BNO055_PWR_MODE, BNO055_UNIT_SEL, BNO055_AXIS_MAP_CONFIG, BNO055_AXIS_MAP_SIGN]
    + list(range(BNO055_SIC_MATRIX_0_LSB, BNO055_MAG_RADIUS_LSB + 2))
)


class FakeBNO055Bus:
    """
    Register-level stand-in for smbus2.SMBus attached to a BNO055.

    Attributes:
        pages: two 128-byte register images
        events: ("write", page, register, data) / ("read", page, register, count)
                / ("sleep", seconds), in order
        fail_registers: {(direction, register)} that raise OSError
        fail_transactions: transaction indices that raise OSError
        stuck: {(page, register): value} that ignore writes
        short_reads: {register: count} to truncate reads
    """

    def __init__(self):
        self.fd = 3
        self.closed = False
        self.pages = {0: bytearray(PAGE_SIZE), 1: bytearray(PAGE_SIZE)}
        self.pointer = 0
        self.transactions = 0
        self.events = []
        self.fail_registers = set()
        self.fail_transactions = set()
        self.stuck = {}
        self.short_reads = {}
        self._load_defaults()

    def _load_defaults(self):
        page0 = self.pages[0]
        page0[BNO055_CHIP_ID] = 0xA0
        page0[BNO055_ACC_ID] = 0xFB
        page0[BNO055_MAG_ID] = 0x32
        page0[BNO055_GYR_ID] = 0x0F
        page0[BNO055_SW_REV_ID_LSB] = 0x11
        page0[BNO055_SW_REV_ID_LSB + 1] = 0x03
        page0[BNO055_BL_REV_ID] = 0x15
        page0[BNO055_TEMP] = 25
        page0[BNO055_ST_RESULT] = 0x0F
        page0[BNO055_UNIT_SEL] = 0x80
        page0[BNO055_AXIS_MAP_CONFIG] = 0x24
        page1 = self.pages[1]
        page1[BNO055_PAGE_ID] = 0x01
        page1[BNO055_ACC_CONFIG] = 0x0D
        page1[BNO055_MAG_CONFIG] = 0x6D
        page1[BNO055_GYR_CONFIG_0] = 0x38

    # -------------------------------------------------------------------------
    # Register image helpers
    # -------------------------------------------------------------------------

    @property
    def page(self) -> int:
        return self.pages[0][BNO055_PAGE_ID] & 0x01

    @property
    def mode(self) -> int:
        return self.pages[0][BNO055_OPR_MODE] & 0x0F

    def register(self, register: int, page: int = 0) -> int:
        return self.pages[page][register]

    def set_block(self, register: int, data, page: int = 0):
        self.pages[page][register:register + len(data)] = bytes(data)

    def set_int16(self, register: int, *values, page: int = 0):
        data = b"".join(int(v).to_bytes(2, "little", signed=True) for v in values)
        self.set_block(register, data, page)

    def writes(self):
        return [e for e in self.events if e[0] == "write"]

    def reads(self):
        return [e for e in self.events if e[0] == "read"]

    def sleeps(self):
        return [e[1] for e in self.events if e[0] == "sleep"]

    def register_writes(self, register: int, page: int = 0):
        """Data bytes written to `register` (excluding pointer-only writes)."""
        return [e[3] for e in self.writes()
                if e[1] == page and e[2] == register and e[3]]

    def sleep(self, seconds: float):
        self.events.append(("sleep", seconds))

    # -------------------------------------------------------------------------
    # smbus2.SMBus interface
    # -------------------------------------------------------------------------

    def i2c_rdwr(self, *msgs):
        index = self.transactions
        self.transactions += 1
        if index in self.fail_transactions:
            raise OSError(121, "Remote I/O error")
        for msg in msgs:
            if msg.flags & I2C_M_RD:
                self._read(msg)
            else:
                self._write(list(msg))

    def _write(self, payload):
        register, data = payload[0], bytes(payload[1:])
        if ("write", register) in self.fail_registers:
            raise OSError(121, "Remote I/O error")
        page = self.page
        self.events.append(("write", page, register, data))
        self.pointer = register
        for offset, value in enumerate(data):
            self._store(page, register + offset, value)

    def _store(self, page: int, register: int, value: int):
        if (page, register) in self.stuck:
            return
        if register == BNO055_PAGE_ID:
            self.pages[0][BNO055_PAGE_ID] = value & 0x01
            self.pages[1][BNO055_PAGE_ID] = value & 0x01
            return
        if page == 0 and register in CONFIG_ONLY_REGISTERS and self.mode != 0:
            return
        self.pages[page][register] = value

    def _read(self, msg):
        register = self.pointer
        if ("read", register) in self.fail_registers:
            raise OSError(121, "Remote I/O error")
        page = self.page
        count = self.short_reads.get(register, msg.len)
        image = self.pages[page]
        data = bytes(self.stuck.get((page, register + i), image[register + i])
                     for i in range(count))
        self.events.append(("read", page, register, msg.len))
        ctypes.memmove(msg.buf, data, count)
        msg.len = count
        self.pointer = register + count

    def close(self):
        self.closed = True


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def fake_bus():
    """Fake sensor; settle sleeps are recorded into its event log."""
    bus = FakeBNO055Bus()
    with patch('pibno055.bus.time.sleep', side_effect=bus.sleep):
        yield bus


@pytest.fixture
def handle(fake_bus):
    """Open bus handle on the fake sensor at the default address."""
    return BusHandle(fake_bus, 0x28, "/dev/i2c-1")


@pytest.fixture
def bno(handle):
    """Driver session on the fake sensor."""
    return BNO055(handle)


@pytest.fixture
def calibration_blob():
    """A recognisable 34-byte calibration block."""
    return bytes(range(0x10, 0x10 + 34))
