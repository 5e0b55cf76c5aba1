"""Error kinds raised by the preview engine."""

from typing import Optional


class PreviewError(Exception):
    """Base class of every preview-engine error.

    Attributes:
        kind: Short machine-readable error kind.
    """
    kind = 'preview'


class UninitializedEngineError(PreviewError):
    """The engine was used before a robot model (or a needed collaborator) was set."""
    kind = 'uninitialized'


class MalformedControlError(PreviewError, ValueError):
    """A control sequence or preview-sequence description is invalid.

    Attributes:
        field: Name of the offending field.
        phase: Index of the offending phase, None for state-level fields.
    """
    kind = 'malformed_control'

    def __init__(self, message: str, field: Optional[str] = None, phase: Optional[int] = None):
        self.field = field
        self.phase = phase
        if phase is not None:
            message = f"phase_{phase}: {message}"
        super().__init__(message)


class NumericDegeneracyError(PreviewError, ArithmeticError):
    """The effective pendulum height is too small (or negative) for the cart-table model.

    Attributes:
        height: The offending CoM height above the CoP (m).
    """
    kind = 'numeric_degeneracy'

    def __init__(self, message: str, height: Optional[float] = None):
        self.height = height
        super().__init__(message)
