"""
BNO055 Errors
=============

Structured error types for the driver. Every error names the register it
was addressing (when there is one) and collects the composite steps it
propagated through, so a failure deep inside a mode switch or calibration
load still says which sub-step broke.

Taxonomy:
    TransportError            - bus open, address bind, probe, closed handle
    RegisterIOError           - failed or short register read/write
    VerificationError         - readback does not match what was requested
    ProtocolPreconditionError - caller passed something the protocol forbids
"""

from contextlib import contextmanager
from typing import Iterator, List, Optional, Tuple


class BNO055Error(Exception):
    """Base class for all driver errors."""

    kind = "bno055"

    def __init__(self, message: str, *, register: Optional[int] = None,
                 operation: str = ""):
        super().__init__(message)
        self.message = message
        self.register = register
        self.operation = operation
        self.context: List[str] = []

    @property
    def cause(self) -> Optional[BaseException]:
        """The lower-level exception this error wraps, if any."""
        return self.__cause__

    def add_context(self, entry: str):
        self.context.append(entry)

    def __str__(self) -> str:
        parts = [self.message]
        if self.register is not None:
            parts.append(f"register 0x{self.register:02X}")
        if self.operation:
            parts.append(f"during {self.operation}")
        text = ", ".join(parts)
        if self.context:
            text += " [" + " <- ".join(self.context) + "]"
        return text


class TransportError(BNO055Error):
    """The bus channel could not be opened, bound or probed."""
    kind = "transport"


class RegisterIOError(BNO055Error):
    """A register read or write failed or came back short."""
    kind = "io"


class VerificationError(BNO055Error):
    """Readback after a write does not match the requested value."""

    kind = "verification"

    def __init__(self, message: str, *, register: Optional[int] = None,
                 operation: str = "",
                 mismatches: Optional[List[Tuple[int, int, int]]] = None):
        super().__init__(message, register=register, operation=operation)
        # (register, expected, actual) for every differing byte
        self.mismatches = mismatches or []


class ProtocolPreconditionError(BNO055Error, ValueError):
    """An argument violates the device protocol; no bus I/O was issued."""
    kind = "precondition"


@contextmanager
def sequence_step(operation: str, step: int, description: str) -> Iterator[None]:
    """
    Attribute any driver error raised inside the block to a composite step.

    The error is annotated and re-raised unchanged in type.
    """
    try:
        yield
    except BNO055Error as e:
        e.add_context(f"{operation} step {step} ({description})")
        raise
