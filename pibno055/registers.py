"""
BNO055 Register Map
===================

Register addresses, enumerated register values and protocol timing for the
Bosch BNO055 9-DOF absolute orientation sensor.

The register space is split into two pages selected through PAGE_ID (0x07),
which is mirrored on both pages. Page 0 holds identity, data, status and
calibration registers; page 1 holds the raw sensor configuration registers.
"""

from enum import IntEnum


# =============================================================================
# Bus Addressing
# =============================================================================

BNO055_ADDR_LOW = 0x28   # COM3 = LOW (default)
BNO055_ADDR_HIGH = 0x29  # COM3 = HIGH
VALID_ADDRESSES = (BNO055_ADDR_LOW, BNO055_ADDR_HIGH)

DEFAULT_BUS_PATH = "/dev/i2c-1"


# =============================================================================
# Page 0 Registers
# =============================================================================

BNO055_CHIP_ID = 0x00
BNO055_ACC_ID = 0x01
BNO055_MAG_ID = 0x02
BNO055_GYR_ID = 0x03
BNO055_SW_REV_ID_LSB = 0x04
BNO055_SW_REV_ID_MSB = 0x05
BNO055_BL_REV_ID = 0x06
BNO055_PAGE_ID = 0x07

# Data blocks (start of each little-endian group)
BNO055_ACC_DATA_X_LSB = 0x08
BNO055_MAG_DATA_X_LSB = 0x0E
BNO055_GYR_DATA_X_LSB = 0x14
BNO055_EUL_HEADING_LSB = 0x1A
BNO055_QUA_DATA_W_LSB = 0x20
BNO055_LIA_DATA_X_LSB = 0x28
BNO055_GRV_DATA_X_LSB = 0x2E

BNO055_TEMP = 0x34
BNO055_CALIB_STAT = 0x35
BNO055_ST_RESULT = 0x36
BNO055_INT_STA = 0x37
BNO055_SYS_CLK_STATUS = 0x38
BNO055_SYS_STATUS = 0x39
BNO055_SYS_ERR = 0x3A
BNO055_UNIT_SEL = 0x3B
BNO055_OPR_MODE = 0x3D
BNO055_PWR_MODE = 0x3E
BNO055_SYS_TRIGGER = 0x3F
BNO055_TEMP_SOURCE = 0x40
BNO055_AXIS_MAP_CONFIG = 0x41
BNO055_AXIS_MAP_SIGN = 0x42

# Soft-iron calibration matrix, start of the persisted calibration block
BNO055_SIC_MATRIX_0_LSB = 0x43

# Calibration offsets and radii (0x55 - 0x6A)
BNO055_ACC_OFFSET_X_LSB = 0x55
BNO055_MAG_OFFSET_X_LSB = 0x5B
BNO055_GYR_OFFSET_X_LSB = 0x61
BNO055_ACC_RADIUS_LSB = 0x67
BNO055_MAG_RADIUS_LSB = 0x69


# =============================================================================
# Page 1 Registers
# =============================================================================

BNO055_ACC_CONFIG = 0x08
BNO055_MAG_CONFIG = 0x09
BNO055_GYR_CONFIG_0 = 0x0A
BNO055_GYR_CONFIG_1 = 0x0B
BNO055_ACC_SLEEP_CONFIG = 0x0C
BNO055_GYR_SLEEP_CONFIG = 0x0D


# =============================================================================
# Register Values
# =============================================================================

BNO055_CHIP_ID_VALUE = 0xA0
BNO055_ACC_ID_VALUE = 0xFB
BNO055_MAG_ID_VALUE = 0x32
BNO055_GYR_ID_VALUE = 0x0F

SYS_TRIGGER_RST_SYS = 0x20   # bit 5: soft reset
SYS_TRIGGER_CLK_SEL = 0x80   # bit 7: external crystal

SELF_TEST_ALL_PASSED = 0x0F

# Valid AXIS_MAP_CONFIG placements (ENU default, NEU, UNE, EUN)
REMAP_CONFIG_VALUES = (0x24, 0x18, 0x09, 0x36)
REMAP_SIGN_MAX = 0x07


class OperationMode(IntEnum):
    """OPR_MODE register values (bits 0-3)."""
    CONFIG = 0x00
    ACCONLY = 0x01
    MAGONLY = 0x02
    GYRONLY = 0x03
    ACCMAG = 0x04
    ACCGYRO = 0x05
    MAGGYRO = 0x06
    AMG = 0x07
    IMU = 0x08
    COMPASS = 0x09
    M4G = 0x0A
    NDOF_FMC_OFF = 0x0B
    NDOF_FMC = 0x0C

    @property
    def is_fusion(self) -> bool:
        """True for modes where the on-chip fusion engine runs."""
        return self >= OperationMode.IMU


class PowerMode(IntEnum):
    """PWR_MODE register values (bits 0-1)."""
    NORMAL = 0x00
    LOW = 0x01
    SUSPEND = 0x02


class RegisterPage(IntEnum):
    """PAGE_ID register values."""
    PAGE0 = 0x00
    PAGE1 = 0x01


class RemapKind(IntEnum):
    """Axis remap register selector, valued by its register address."""
    CONFIG = BNO055_AXIS_MAP_CONFIG
    SIGN = BNO055_AXIS_MAP_SIGN


class SystemStatus(IntEnum):
    """SYS_STATUS register values."""
    IDLE = 0
    SYSTEM_ERROR = 1
    INITIALIZING_PERIPHERALS = 2
    SYSTEM_INITIALIZATION = 3
    EXECUTING_SELF_TEST = 4
    FUSION_RUNNING = 5
    RUNNING_WITHOUT_FUSION = 6


# =============================================================================
# Block Lengths
# =============================================================================

IDENTITY_BYTECOUNT = 7      # 0x00 - 0x06
TRIPLE_BYTECOUNT = 6        # x, y, z int16 pairs
QUATERNION_BYTECOUNT = 8    # w, x, y, z int16 pairs
OFFSETS_BYTECOUNT = 22      # 0x55 - 0x6A
CALIB_BYTECOUNT = 34        # persisted calibration block from 0x43

DUMP_ROW_BYTECOUNT = 16
DUMP_ROWS_PER_PAGE = 8


# =============================================================================
# Scale Factors (LSB per unit)
# =============================================================================

MAG_SCALE = 16.0        # LSB per uT
GYRO_SCALE = 16.0       # LSB per deg/s
EULER_SCALE = 16.0      # LSB per degree
QUAT_SCALE = 16384.0    # LSB per unit quaternion (2^14)
ACCEL_MG_FACTOR = 1.0   # 1 mg = 1 LSB
ACCEL_MS2_FACTOR = 100.0  # 1 m/s² = 100 LSB


# =============================================================================
# Settle Times (seconds)
# =============================================================================

# any -> CONFIG needs 7 ms, CONFIG -> any needs 19 ms (datasheet table 3-6)
MODE_TO_CONFIG_SETTLE_S = 0.010
MODE_FROM_CONFIG_SETTLE_S = 0.025
POWER_MODE_SETTLE_S = 0.030
CALIB_LOAD_SETTLE_S = 0.050
PAGE_DUMP_SETTLE_S = 0.050
# Fusion engine re-convergence after calibration load, and boot after reset
CALIB_APPLY_SETTLE_S = 0.650
RESET_BOOT_S = 0.650
