"""
Tests for BNO055 Sensor Reader
==============================

Tests for sensor data decoding including:
- Fixed scale factors per data block
- UNIT_SEL dependent gravity / linear acceleration
- Device information assembly
- Page 1 sensor configuration
"""

import pytest

import numpy as np

from pibno055.errors import RegisterIOError
from pibno055.modes import ModeController
from pibno055.pages import PageSelector
from pibno055.registers import (
    BNO055_ACC_CONFIG,
    BNO055_ACC_DATA_X_LSB,
    BNO055_ACC_SLEEP_CONFIG,
    BNO055_EUL_HEADING_LSB,
    BNO055_GRV_DATA_X_LSB,
    BNO055_GYR_CONFIG_0,
    BNO055_GYR_CONFIG_1,
    BNO055_GYR_DATA_X_LSB,
    BNO055_LIA_DATA_X_LSB,
    BNO055_MAG_CONFIG,
    BNO055_MAG_DATA_X_LSB,
    BNO055_OPR_MODE,
    BNO055_PWR_MODE,
    BNO055_QUA_DATA_W_LSB,
    BNO055_SYS_ERR,
    BNO055_SYS_STATUS,
    BNO055_SYS_TRIGGER,
    BNO055_TEMP,
    BNO055_UNIT_SEL,
    OperationMode,
    PowerMode,
)
from pibno055.sensors import SensorReader


@pytest.fixture
def sensors(handle):
    return SensorReader(handle, ModeController(handle), PageSelector(handle))


# =============================================================================
# Test Motion Data
# =============================================================================

class TestMotionData:
    """Tests for data block decoding."""

    def test_acceleration_raw(self, sensors, fake_bus):
        """Accelerometer values are raw LSB."""
        fake_bus.set_int16(BNO055_ACC_DATA_X_LSB, 12, -34, 981)
        acc = sensors.read_acceleration()
        assert (acc.x, acc.y, acc.z) == (12.0, -34.0, 981.0)

    def test_magnetometer(self, sensors, fake_bus):
        """16 LSB per microtesla."""
        fake_bus.set_int16(BNO055_MAG_DATA_X_LSB, 160, -320, 8)
        mag = sensors.read_magnetometer()
        assert mag.x == pytest.approx(10.0)
        assert mag.y == pytest.approx(-20.0)
        assert mag.z == pytest.approx(0.5)

    def test_gyroscope(self, sensors, fake_bus):
        """16 LSB per deg/s."""
        fake_bus.set_int16(BNO055_GYR_DATA_X_LSB, -16, 0, 32767)
        gyr = sensors.read_gyroscope()
        assert gyr.x == pytest.approx(-1.0)
        assert gyr.z == pytest.approx(32767 / 16)

    def test_euler(self, sensors, fake_bus):
        """16 LSB per degree, heading / roll / pitch order."""
        fake_bus.set_int16(BNO055_EUL_HEADING_LSB, 5760, -160, 80)
        eul = sensors.read_euler()
        assert eul.heading == pytest.approx(360.0)
        assert eul.roll == pytest.approx(-10.0)
        assert eul.pitch == pytest.approx(5.0)

    def test_euler_single_burst(self, sensors, fake_bus):
        """All three angles come from one burst read."""
        sensors.read_euler()
        assert fake_bus.reads() == [("read", 0, BNO055_EUL_HEADING_LSB, 6)]

    def test_quaternion(self, sensors, fake_bus):
        """16384 LSB per unit, w first."""
        fake_bus.set_int16(BNO055_QUA_DATA_W_LSB, 0x4000, 0, -0x2000, 0)
        qua = sensors.read_quaternion()
        assert (qua.w, qua.x, qua.y, qua.z) == (1.0, 0.0, -0.5, 0.0)

    def test_quaternion_min(self, sensors, fake_bus):
        fake_bus.set_int16(BNO055_QUA_DATA_W_LSB, -32768, 0, 0, 0)
        assert sensors.read_quaternion().w == pytest.approx(-2.0)

    def test_as_array(self, sensors, fake_bus):
        fake_bus.set_int16(BNO055_QUA_DATA_W_LSB, 0x4000, 0, 0, 0)
        np.testing.assert_allclose(sensors.read_quaternion().as_array(), [1.0, 0.0, 0.0, 0.0])

    def test_read_failure(self, sensors, fake_bus):
        fake_bus.fail_registers.add(("read", BNO055_MAG_DATA_X_LSB))
        with pytest.raises(RegisterIOError):
            sensors.read_magnetometer()


class TestUnitDependentData:
    """Tests for gravity and linear acceleration."""

    def test_gravity_ms2(self, sensors, fake_bus):
        """UNIT_SEL bit 0 clear: 100 LSB per m/s²."""
        fake_bus.pages[0][BNO055_UNIT_SEL] = 0x00
        fake_bus.set_int16(BNO055_GRV_DATA_X_LSB, 1000, 0, -981)
        grv = sensors.read_gravity()
        assert grv.x == pytest.approx(10.0)
        assert grv.z == pytest.approx(-9.81)

    def test_gravity_mg(self, sensors, fake_bus):
        """UNIT_SEL bit 0 set: 1 LSB per mg."""
        fake_bus.pages[0][BNO055_UNIT_SEL] = 0x01
        fake_bus.set_int16(BNO055_GRV_DATA_X_LSB, 1000, 0, 0)
        assert sensors.read_gravity().x == pytest.approx(1000.0)

    def test_linear_acceleration(self, sensors, fake_bus):
        fake_bus.set_int16(BNO055_LIA_DATA_X_LSB, -50, 25, 0)
        lin = sensors.read_linear_acceleration()
        assert (lin.x, lin.y, lin.z) == pytest.approx((-0.5, 0.25, 0.0))

    def test_unit_factor_reread_each_sample(self, sensors, fake_bus):
        """A UNIT_SEL change between samples takes effect immediately."""
        fake_bus.set_int16(BNO055_LIA_DATA_X_LSB, 1000, 0, 0)
        assert sensors.read_linear_acceleration().x == pytest.approx(10.0)
        fake_bus.pages[0][BNO055_UNIT_SEL] = 0x01
        assert sensors.read_linear_acceleration().x == pytest.approx(1000.0)
        reads = fake_bus.reads()
        assert reads == [
            ("read", 0, BNO055_UNIT_SEL, 1),
            ("read", 0, BNO055_LIA_DATA_X_LSB, 6),
            ("read", 0, BNO055_UNIT_SEL, 1),
            ("read", 0, BNO055_LIA_DATA_X_LSB, 6),
        ]

    def test_unit_read_failure_skips_data(self, sensors, fake_bus):
        """If UNIT_SEL cannot be read, the data block is not read."""
        fake_bus.fail_registers.add(("read", BNO055_UNIT_SEL))
        with pytest.raises(RegisterIOError):
            sensors.read_gravity()
        assert all(e[2] != BNO055_GRV_DATA_X_LSB for e in fake_bus.events if e[0] != "sleep")


# =============================================================================
# Test Status and Device Info
# =============================================================================

class TestDeviceInfo:
    """Tests for read_device_info."""

    def test_device_info(self, sensors, fake_bus):
        """All identity and state fields are decoded."""
        fake_bus.pages[0][BNO055_OPR_MODE] = 0x0C
        fake_bus.pages[0][BNO055_SYS_STATUS] = 5
        fake_bus.pages[0][BNO055_TEMP] = 0xF6

        info = sensors.read_device_info()

        assert info.chip_id == 0xA0
        assert info.accel_id == 0xFB
        assert info.mag_id == 0x32
        assert info.gyro_id == 0x0F
        assert info.software_revision == 0x0311
        assert info.bootloader_revision == 0x15
        assert info.operation_mode == OperationMode.NDOF_FMC
        assert info.power_mode == PowerMode.NORMAL
        assert info.remap_config == 0x24
        assert info.remap_sign == 0x00
        assert info.system_status == 5
        assert info.self_test_passed
        assert info.system_error == 0
        assert info.units.android_orientation
        assert not info.units.accel_mg
        assert info.temperature == -10

    def test_self_test_failure(self, sensors, fake_bus):
        fake_bus.pages[0][0x36] = 0xFB
        info = sensors.read_device_info()
        assert info.self_test == 0x0B
        assert not info.self_test_passed

    def test_failure_stops_assembly(self, sensors, fake_bus):
        """The first failing sub-read aborts and is named in the error."""
        fake_bus.fail_registers.add(("read", BNO055_PWR_MODE))
        with pytest.raises(RegisterIOError) as exc_info:
            sensors.read_device_info()
        assert exc_info.value.context == ["read_device_info step 3 (power mode)"]
        read_registers = [e[2] for e in fake_bus.reads()]
        assert BNO055_SYS_ERR not in read_registers
        assert BNO055_TEMP not in read_registers

    def test_system_status(self, sensors, fake_bus):
        fake_bus.pages[0][BNO055_SYS_STATUS] = 6
        assert sensors.read_system_status() == 6

    def test_clock_source(self, sensors, fake_bus):
        assert sensors.read_clock_source() == 0
        fake_bus.pages[0][BNO055_SYS_TRIGGER] = 0x80
        assert sensors.read_clock_source() == 1


# =============================================================================
# Test Page 1 Configuration
# =============================================================================

class TestSensorConfig:
    """Tests for page 1 sensor configuration reads."""

    def test_accel_config(self, sensors, fake_bus):
        """Defaults: 4G, 62.5 Hz, normal; range bits 0-1, bandwidth 2-4, power 5-7."""
        fake_bus.pages[1][BNO055_ACC_SLEEP_CONFIG] = 0b0001_1011
        acc = sensors.read_accel_config()
        assert acc.g_range == 1
        assert acc.bandwidth == 3
        assert acc.power_mode == 0
        assert acc.sleep_mode == 1
        assert acc.sleep_duration == 0b1101
        assert fake_bus.page == 0

    def test_mag_config(self, sensors, fake_bus):
        """Default 0x6D: 20 Hz, enhanced regular, force mode."""
        mag = sensors.read_mag_config()
        assert (mag.data_rate, mag.operation_mode, mag.power_mode) == (5, 1, 3)
        assert fake_bus.page == 0

    def test_gyro_config(self, sensors, fake_bus):
        """Config_0 range/bandwidth, Config_1 power mode."""
        fake_bus.pages[1][BNO055_GYR_CONFIG_1] = 0x04
        gyr = sensors.read_gyro_config()
        assert (gyr.dps_range, gyr.bandwidth, gyr.power_mode) == (0, 7, 4)
        assert ("read", 1, BNO055_GYR_CONFIG_0, 2) in fake_bus.events

    def test_config_reads_on_page1(self, sensors, fake_bus):
        sensors.read_accel_config()
        assert ("read", 1, BNO055_ACC_CONFIG, 1) in fake_bus.events
        assert ("read", 1, BNO055_ACC_SLEEP_CONFIG, 1) in fake_bus.events

    def test_config_failure_restores_page0(self, sensors, fake_bus):
        """A failed page-1 read still returns to page 0."""
        fake_bus.fail_registers.add(("read", BNO055_MAG_CONFIG))
        with pytest.raises(RegisterIOError):
            sensors.read_mag_config()
        assert fake_bus.page == 0
