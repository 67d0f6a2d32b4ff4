"""
Register Field Decoders
=======================

Typed accessors for bit-packed BNO055 registers and for the little-endian
signed 16-bit register pairs used by every data block.

Each decoder takes the raw register byte and documents the bits it reads.
"""

import numpy as np

from .registers import ACCEL_MG_FACTOR, ACCEL_MS2_FACTOR


# =============================================================================
# Fixed-Point Decoding
# =============================================================================

def decode_int16_le(data: bytes) -> np.ndarray:
    """Decode consecutive little-endian signed 16-bit pairs."""
    if len(data) % 2:
        raise ValueError(f"Register pairs need an even byte count, got {len(data)}")
    return np.frombuffer(bytes(data), dtype="<i2").astype(np.int64)


def decode_scaled(data: bytes, divisor: float) -> np.ndarray:
    """Decode int16 pairs and divide by a fixed LSB-per-unit factor."""
    return decode_int16_le(data).astype(np.float64) / divisor


def decode_int8(value: int) -> int:
    """Two's complement of a single register byte (TEMP)."""
    value &= 0xFF
    return value - 0x100 if value & 0x80 else value


# =============================================================================
# Page 0 Fields
# =============================================================================

def opr_mode_bits(value: int) -> int:
    """OPR_MODE bits 0-3: operating mode code 0-12. Bits 4-7 are reserved."""
    return value & 0x0F


def pwr_mode_bits(value: int) -> int:
    """PWR_MODE bits 0-1: power mode code 0-2. Bits 2-7 are reserved."""
    return value & 0x03


def calib_stat_fields(value: int):
    """
    CALIB_STAT fields, each 0-3 with 3 = fully calibrated.

    Returns (system bits 6-7, gyro bits 4-5, accel bits 2-3, mag bits 0-1).
    """
    return (
        (value >> 6) & 0x03,
        (value >> 4) & 0x03,
        (value >> 2) & 0x03,
        value & 0x03,
    )


def self_test_bits(value: int) -> int:
    """ST_RESULT bits 0-3: accel, mag, gyro, MCU self-test pass flags."""
    return value & 0x0F


def accel_unit_is_mg(unit_sel: int) -> bool:
    """UNIT_SEL bit 0: 1 = mg, 0 = m/s²."""
    return bool(unit_sel & 0x01)


def accel_unit_factor(unit_sel: int) -> float:
    """LSB per unit for accel-derived data selected by UNIT_SEL bit 0."""
    return ACCEL_MG_FACTOR if accel_unit_is_mg(unit_sel) else ACCEL_MS2_FACTOR


def gyro_unit_is_rps(unit_sel: int) -> bool:
    """UNIT_SEL bit 1: 1 = rad/s, 0 = deg/s."""
    return bool((unit_sel >> 1) & 0x01)


def euler_unit_is_radians(unit_sel: int) -> bool:
    """UNIT_SEL bit 2: 1 = radians, 0 = degrees."""
    return bool((unit_sel >> 2) & 0x01)


def temp_unit_is_fahrenheit(unit_sel: int) -> bool:
    """UNIT_SEL bit 4: 1 = Fahrenheit, 0 = Celsius."""
    return bool((unit_sel >> 4) & 0x01)


def orientation_is_android(unit_sel: int) -> bool:
    """UNIT_SEL bit 7: 1 = Android pitch convention, 0 = Windows."""
    return bool((unit_sel >> 7) & 0x01)


def clock_source_bit(sys_trigger: int) -> int:
    """SYS_TRIGGER bit 7: 0 = internal oscillator, 1 = external crystal."""
    return (sys_trigger >> 7) & 0x01


# =============================================================================
# Page 1 Fields
# =============================================================================

def acc_config_fields(value: int):
    """
    ACC_Config (page 1, 0x08).

    Returns (g-range bits 0-1: 0-3 for 2/4/8/16 G,
             bandwidth bits 2-4: 0-7 for 7.81 Hz .. 1 kHz,
             power mode bits 5-7: 0-5 normal .. deep suspend).
    """
    return value & 0x03, (value >> 2) & 0x07, (value >> 5) & 0x07


def acc_sleep_config_fields(value: int):
    """
    ACC_Sleep_Config (page 1, 0x0C).

    Returns (sleep mode bit 0: 0 event-driven, 1 equidistant sampling,
             sleep duration bits 1-4: 0-15, values below 6 mean 0.5 ms).
    """
    return value & 0x01, (value >> 1) & 0x0F


def mag_config_fields(value: int):
    """
    MAG_Config (page 1, 0x09).

    Returns (data rate bits 0-2: 0-7 for 2 .. 30 Hz,
             operation mode bits 3-4: 0-3 low power .. high accuracy,
             power mode bits 5-6: 0-3 normal .. force mode).
    """
    return value & 0x07, (value >> 3) & 0x03, (value >> 5) & 0x03


def gyr_config_fields(config_0: int, config_1: int):
    """
    GYR_Config_0 / GYR_Config_1 (page 1, 0x0A / 0x0B).

    Returns (range config_0 bits 0-2: 0-4 for 2000 .. 125 dps,
             bandwidth config_0 bits 3-5: 0-7 for 523 .. 32 Hz,
             power mode config_1 bits 0-2: 0-4 normal .. advanced power save).
    """
    return config_0 & 0x07, (config_0 >> 3) & 0x07, config_1 & 0x07
