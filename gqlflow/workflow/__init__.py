"""Flow execution module."""

from .pointers import UNDEFINED, extract_path, is_undefined
from .expectations import ValidationResult, validate_expected

__all__ = ['UNDEFINED', 'extract_path', 'is_undefined', 'ValidationResult', 'validate_expected']
