#!/usr/bin/env python3
"""
getbno055
=========

Command-line access to a BNO055 on the Raspberry Pi I2C bus.

Usage:
    getbno055 -t inf                   # device information
    getbno055 -t eul                   # Euler angles
    getbno055 -m NDOF_FMC              # set operation mode
    getbno055 -p LOW                   # set power mode
    getbno055 -w bno055.cal            # save calibration to file
    getbno055 -l bno055.cal -t eul     # load calibration, then read
    getbno055 -d                       # dump both register pages
    getbno055 -r                       # soft reset

    # Alternate address, verbose register trace
    getbno055 -a 0x29 -v -t cal
"""

import argparse
import logging
import sys
from dataclasses import replace

from .config import BNO055Config, parse_address, parse_enum
from .device import BNO055
from .errors import BNO055Error
from .registers import OperationMode, PowerMode, SystemStatus

logger = logging.getLogger(__name__)

READ_TYPES = ("inf", "cal", "acc", "mag", "gyr", "eul", "qua", "gra", "lin", "con")


def format_triple(label: str, sample) -> str:
    values = "  ".join(f"{name}: {value:8.2f}" for name, value in vars(sample).items())
    return f"{label:<6} {values}"


def print_info(bno: BNO055):
    info = bno.sensors.read_device_info()
    try:
        status = SystemStatus(info.system_status).name
    except ValueError:
        status = "UNKNOWN"
    units = info.units
    print(f"BNO055 Chip ID: 0x{info.chip_id:02X}  Accel ID: 0x{info.accel_id:02X}  "
          f"Mag ID: 0x{info.mag_id:02X}  Gyro ID: 0x{info.gyro_id:02X}")
    print(f"Software Rev: 0x{info.software_revision:04X}  Bootloader: 0x{info.bootloader_revision:02X}")
    print(f"Operation Mode: {info.operation_mode.name}  Power Mode: {info.power_mode.name}")
    print(f"Axis Remap: config 0x{info.remap_config:02X} sign 0x{info.remap_sign:02X}")
    print(f"System Status: {status} ({info.system_status})  Error: {info.system_error}  "
          f"Self-Test: {'PASS' if info.self_test_passed else 'FAIL'} (0x{info.self_test:X})")
    print(f"Units: accel {'mg' if units.accel_mg else 'm/s2'}, "
          f"gyro {'rps' if units.gyro_rps else 'dps'}, "
          f"euler {'radians' if units.euler_radians else 'degrees'}, "
          f"temp {'F' if units.temp_fahrenheit else 'C'}")
    print(f"Temperature: {info.temperature}{'F' if units.temp_fahrenheit else 'C'}")
    print(f"Clock Source: {'external' if bno.sensors.read_clock_source() else 'internal'}")


def print_calibration(bno: BNO055):
    status = bno.calibration.read_status()
    print(f"Calibration: sys={status.system} gyro={status.gyroscope} "
          f"accel={status.accelerometer} mag={status.magnetometer}")
    offsets = bno.calibration.read_offsets()
    print(f"Accel offset: {offsets.accel}  radius {offsets.accel_radius}")
    print(f"Mag offset:   {offsets.mag}  radius {offsets.mag_radius}")
    print(f"Gyro offset:  {offsets.gyro}")


def print_config(bno: BNO055):
    acc = bno.sensors.read_accel_config()
    mag = bno.sensors.read_mag_config()
    gyr = bno.sensors.read_gyro_config()
    print(f"Accel: range {acc.g_range} bandwidth {acc.bandwidth} power {acc.power_mode} "
          f"sleep mode {acc.sleep_mode} duration {acc.sleep_duration}")
    print(f"Mag:   rate {mag.data_rate} op mode {mag.operation_mode} power {mag.power_mode}")
    print(f"Gyro:  range {gyr.dps_range} bandwidth {gyr.bandwidth} power {gyr.power_mode}")


def print_reading(bno: BNO055, kind: str):
    sensors = bno.sensors
    if kind == "inf":
        print_info(bno)
    elif kind == "cal":
        print_calibration(bno)
    elif kind == "con":
        print_config(bno)
    elif kind == "acc":
        print(format_triple("ACC", sensors.read_acceleration()))
    elif kind == "mag":
        print(format_triple("MAG", sensors.read_magnetometer()))
    elif kind == "gyr":
        print(format_triple("GYR", sensors.read_gyroscope()))
    elif kind == "eul":
        print(format_triple("EUL", sensors.read_euler()))
    elif kind == "qua":
        print(format_triple("QUA", sensors.read_quaternion()))
    elif kind == "gra":
        print(format_triple("GRA", sensors.read_gravity()))
    elif kind == "lin":
        print(format_triple("LIN", sensors.read_linear_acceleration()))


def operation_mode(value: str) -> OperationMode:
    return parse_enum(OperationMode, value)


def power_mode(value: str) -> PowerMode:
    return parse_enum(PowerMode, value)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="getbno055",
                                     description="Read and configure a BNO055 IMU over I2C")
    parser.add_argument("--bus", "-b", type=str, default=None,
                        help="I2C bus device (default: /dev/i2c-1)")
    parser.add_argument("--address", "-a", type=parse_address, default=None,
                        help="I2C address (default: 0x28)")
    parser.add_argument("--config", "-c", type=str, default=None,
                        help="JSON config file")
    parser.add_argument("--verbose", "-v", action="store_true",
                        help="Debug output with register trace")
    parser.add_argument("--type", "-t", choices=READ_TYPES,
                        help="Data to read")
    parser.add_argument("--mode", "-m", type=operation_mode,
                        help="Set operation mode (name or code)")
    parser.add_argument("--power", "-p", type=power_mode,
                        help="Set power mode (NORMAL, LOW, SUSPEND)")
    parser.add_argument("--write-cal", "-w", metavar="FILE",
                        help="Save calibration to file")
    parser.add_argument("--load-cal", "-l", metavar="FILE",
                        help="Load calibration from file")
    parser.add_argument("--dump", "-d", action="store_true",
                        help="Dump register pages 0 and 1")
    parser.add_argument("--reset", "-r", action="store_true",
                        help="Soft-reset the sensor")
    return parser


def setup_logging(verbose: bool):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging(args.verbose)

    if not any((args.type, args.mode is not None, args.power is not None,
                args.write_cal, args.load_cal, args.dump, args.reset)):
        parser.print_help()
        return 1

    try:
        config = BNO055Config.load(args.config) if args.config else BNO055Config()
        if args.bus:
            config = replace(config, bus_path=args.bus)
        if args.address is not None:
            config = replace(config, address=args.address)

        with BNO055.from_config(config) as bno:
            if args.reset:
                bno.reset()
                print("BNO055 reset complete")
                return 0
            if args.load_cal:
                bno.load_calibration_file(args.load_cal)
            if args.mode is not None:
                bno.modes.set_mode(args.mode)
            if args.power is not None:
                bno.modes.set_power(args.power)
            if args.write_cal:
                bno.save_calibration_file(args.write_cal)
            if args.dump:
                print(bno.diagnostics.dump().format())
            if args.type:
                print_reading(bno, args.type)
    except (BNO055Error, OSError) as e:
        logger.error(f"{e}")
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
