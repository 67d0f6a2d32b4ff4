"""
BNO055 Sensor Reader
====================

Decodes data blocks into physical units and assembles device information.

Every reading selects the block's start register and burst-reads the whole
block, so all axes come from the same sample. Fixed scale factors:

    magnetometer      16 LSB / uT
    gyroscope         16 LSB / (deg/s)
    Euler angles      16 LSB / degree
    quaternion     16384 LSB / unit
    acceleration      raw LSB (unit depends on UNIT_SEL and range)
    gravity, linear   1 LSB / mg or 100 LSB / (m/s²), per UNIT_SEL bit 0

The unit factor for gravity and linear acceleration is re-read from
UNIT_SEL before every sample so it always reflects the current setting.
"""

import logging

from .bus import BusHandle
from .data import (
    AccelConfig,
    Acceleration,
    DeviceInfo,
    Euler,
    Gravity,
    GyroConfig,
    Gyroscope,
    LinearAcceleration,
    MagConfig,
    Magnetometer,
    Quaternion,
    UnitSelection,
)
from .errors import sequence_step
from .fields import (
    acc_config_fields,
    acc_sleep_config_fields,
    accel_unit_factor,
    clock_source_bit,
    decode_int16_le,
    decode_int8,
    decode_scaled,
    gyr_config_fields,
    mag_config_fields,
    self_test_bits,
)
from .modes import ModeController
from .pages import PageSelector
from .registers import (
    BNO055_ACC_CONFIG,
    BNO055_ACC_DATA_X_LSB,
    BNO055_ACC_SLEEP_CONFIG,
    BNO055_CHIP_ID,
    BNO055_EUL_HEADING_LSB,
    BNO055_GRV_DATA_X_LSB,
    BNO055_GYR_CONFIG_0,
    BNO055_GYR_DATA_X_LSB,
    BNO055_LIA_DATA_X_LSB,
    BNO055_MAG_CONFIG,
    BNO055_MAG_DATA_X_LSB,
    BNO055_QUA_DATA_W_LSB,
    BNO055_ST_RESULT,
    BNO055_SYS_ERR,
    BNO055_SYS_STATUS,
    BNO055_SYS_TRIGGER,
    BNO055_TEMP,
    BNO055_UNIT_SEL,
    EULER_SCALE,
    GYRO_SCALE,
    IDENTITY_BYTECOUNT,
    MAG_SCALE,
    QUATERNION_BYTECOUNT,
    QUAT_SCALE,
    RemapKind,
    TRIPLE_BYTECOUNT,
)

logger = logging.getLogger(__name__)


class SensorReader:
    """Typed getters for data, identity and configuration registers."""

    def __init__(self, handle: BusHandle, modes: ModeController, pages: PageSelector):
        self.handle = handle
        self.modes = modes
        self.pages = pages

    def _read_triple(self, register: int, divisor: float):
        return decode_scaled(self.handle.read_register(register, TRIPLE_BYTECOUNT), divisor)

    # -------------------------------------------------------------------------
    # Motion data
    # -------------------------------------------------------------------------

    def read_acceleration(self) -> Acceleration:
        """Raw accelerometer LSB, unscaled."""
        x, y, z = decode_int16_le(self.handle.read_register(BNO055_ACC_DATA_X_LSB,
                                                            TRIPLE_BYTECOUNT))
        return Acceleration(float(x), float(y), float(z))

    def read_magnetometer(self) -> Magnetometer:
        return Magnetometer(*map(float, self._read_triple(BNO055_MAG_DATA_X_LSB, MAG_SCALE)))

    def read_gyroscope(self) -> Gyroscope:
        return Gyroscope(*map(float, self._read_triple(BNO055_GYR_DATA_X_LSB, GYRO_SCALE)))

    def read_euler(self) -> Euler:
        """Heading, roll, pitch in degrees."""
        return Euler(*map(float, self._read_triple(BNO055_EUL_HEADING_LSB, EULER_SCALE)))

    def read_quaternion(self) -> Quaternion:
        data = self.handle.read_register(BNO055_QUA_DATA_W_LSB, QUATERNION_BYTECOUNT)
        return Quaternion(*map(float, decode_scaled(data, QUAT_SCALE)))

    def read_unit_factor(self) -> float:
        """LSB per unit for gravity/linear acceleration from UNIT_SEL bit 0."""
        return accel_unit_factor(self.handle.read_byte(BNO055_UNIT_SEL))

    def read_gravity(self) -> Gravity:
        """Gravity vector in m/s² or mg, per the current UNIT_SEL."""
        factor = self.read_unit_factor()
        return Gravity(*map(float, self._read_triple(BNO055_GRV_DATA_X_LSB, factor)))

    def read_linear_acceleration(self) -> LinearAcceleration:
        """Linear acceleration in m/s² or mg, per the current UNIT_SEL."""
        factor = self.read_unit_factor()
        return LinearAcceleration(*map(float, self._read_triple(BNO055_LIA_DATA_X_LSB, factor)))

    # -------------------------------------------------------------------------
    # Status and identity
    # -------------------------------------------------------------------------

    def read_system_status(self) -> int:
        """SYS_STATUS code, see registers.SystemStatus."""
        return self.handle.read_byte(BNO055_SYS_STATUS)

    def read_clock_source(self) -> int:
        """0 = internal oscillator, 1 = external crystal."""
        return clock_source_bit(self.handle.read_byte(BNO055_SYS_TRIGGER))

    def read_device_info(self) -> DeviceInfo:
        """
        Assemble identity and state registers.

        Each sub-read is its own transaction; the first failure aborts the
        assembly and names the sub-read in the error context.
        """
        op = "read_device_info"

        with sequence_step(op, 1, "identity registers"):
            ident = self.handle.read_register(BNO055_CHIP_ID, IDENTITY_BYTECOUNT)
        with sequence_step(op, 2, "operation mode"):
            mode = self.modes.get_mode()
        with sequence_step(op, 3, "power mode"):
            power = self.modes.get_power()
        with sequence_step(op, 4, "axis remap config"):
            remap_config = self.modes.get_remap(RemapKind.CONFIG)
        with sequence_step(op, 5, "axis remap sign"):
            remap_sign = self.modes.get_remap(RemapKind.SIGN)
        with sequence_step(op, 6, "system status"):
            sys_status = self.handle.read_byte(BNO055_SYS_STATUS)
        with sequence_step(op, 7, "self-test result"):
            self_test = self_test_bits(self.handle.read_byte(BNO055_ST_RESULT))
        with sequence_step(op, 8, "system error"):
            sys_error = self.handle.read_byte(BNO055_SYS_ERR)
        with sequence_step(op, 9, "unit selection"):
            units = UnitSelection(self.handle.read_byte(BNO055_UNIT_SEL))
        with sequence_step(op, 10, "temperature"):
            temperature = decode_int8(self.handle.read_byte(BNO055_TEMP))

        return DeviceInfo(
            chip_id=ident[0],
            accel_id=ident[1],
            mag_id=ident[2],
            gyro_id=ident[3],
            software_revision=(ident[5] << 8) | ident[4],
            bootloader_revision=ident[6],
            operation_mode=mode,
            power_mode=power,
            remap_config=remap_config,
            remap_sign=remap_sign,
            system_status=sys_status,
            self_test=self_test,
            system_error=sys_error,
            units=units,
            temperature=temperature,
        )

    # -------------------------------------------------------------------------
    # Page 1 sensor configuration
    # -------------------------------------------------------------------------

    def read_accel_config(self) -> AccelConfig:
        with self.pages.page1():
            with sequence_step("read_accel_config", 1, "ACC_Config"):
                config = self.handle.read_byte(BNO055_ACC_CONFIG)
            with sequence_step("read_accel_config", 2, "ACC_Sleep_Config"):
                sleep = self.handle.read_byte(BNO055_ACC_SLEEP_CONFIG)
        g_range, bandwidth, power_mode = acc_config_fields(config)
        sleep_mode, sleep_duration = acc_sleep_config_fields(sleep)
        return AccelConfig(g_range, bandwidth, power_mode, sleep_mode, sleep_duration)

    def read_mag_config(self) -> MagConfig:
        with self.pages.page1():
            config = self.handle.read_byte(BNO055_MAG_CONFIG)
        return MagConfig(*mag_config_fields(config))

    def read_gyro_config(self) -> GyroConfig:
        # GYR_Config_0 and GYR_Config_1 are adjacent
        with self.pages.page1():
            config_0, config_1 = self.handle.read_register(BNO055_GYR_CONFIG_0, 2)
        return GyroConfig(*gyr_config_fields(config_0, config_1))
