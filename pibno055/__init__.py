"""
BNO055 Driver
=============

I2C driver for the Bosch BNO055 9-axis absolute orientation sensor on a
Raspberry Pi or any Linux host with /dev/i2c-N.

Components (all share one BusHandle):
    - PageSelector: register page switching, page 0 restored on every exit
    - ModeController: operation mode, power mode and axis remap
    - CalibrationManager: calibration status, offsets, save / load
    - SensorReader: scaled sensor data, device info, page-1 config
    - DiagnosticDumper / ResetController: register dump and soft reset

BNO055 ties them together for one open sensor.
"""

from .bus import BusHandle, open_bus

from .errors import (
    BNO055Error,
    TransportError,
    RegisterIOError,
    VerificationError,
    ProtocolPreconditionError,
)

from .registers import (
    OperationMode,
    PowerMode,
    RegisterPage,
    RemapKind,
    SystemStatus,
)

from .data import (
    Acceleration,
    Magnetometer,
    Gyroscope,
    Euler,
    Quaternion,
    Gravity,
    LinearAcceleration,
    CalibrationStatus,
    CalibrationOffsets,
    DeviceInfo,
    AccelConfig,
    MagConfig,
    GyroConfig,
    RegisterDump,
)

from .pages import PageSelector
from .modes import ModeController
from .calibration import (
    CalibrationManager,
    read_calibration_file,
    write_calibration_file,
)
from .sensors import SensorReader
from .diagnostics import DiagnosticDumper, ResetController
from .config import BNO055Config
from .device import BNO055

__all__ = [
    # Session
    'BNO055',
    'BNO055Config',
    'BusHandle',
    'open_bus',
    # Components
    'PageSelector',
    'ModeController',
    'CalibrationManager',
    'SensorReader',
    'DiagnosticDumper',
    'ResetController',
    'read_calibration_file',
    'write_calibration_file',
    # Errors
    'BNO055Error',
    'TransportError',
    'RegisterIOError',
    'VerificationError',
    'ProtocolPreconditionError',
    # Register enums
    'OperationMode',
    'PowerMode',
    'RegisterPage',
    'RemapKind',
    'SystemStatus',
    # Data types
    'Acceleration',
    'Magnetometer',
    'Gyroscope',
    'Euler',
    'Quaternion',
    'Gravity',
    'LinearAcceleration',
    'CalibrationStatus',
    'CalibrationOffsets',
    'DeviceInfo',
    'AccelConfig',
    'MagConfig',
    'GyroConfig',
    'RegisterDump',
]
