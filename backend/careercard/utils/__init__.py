"""
Utility functions and helpers
"""
from .exceptions import CareerCardException, ValidationError, register_error_handlers
from .validation import validate_request

__all__ = ['CareerCardException', 'ValidationError', 'register_error_handlers', 'validate_request']
