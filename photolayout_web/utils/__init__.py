"""Shared utilities"""

from .validators import safe_float, optional_float, parse_bool, require_str

__all__ = ['safe_float', 'optional_float', 'parse_bool', 'require_str']
