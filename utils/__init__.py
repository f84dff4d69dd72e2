"""Shared utilities for the screening score engine."""

from .config_loader import load_config, get_nested_config
from .numeric import clamp, is_finite_number, round1

__all__ = [
    'load_config',
    'get_nested_config',
    'clamp',
    'is_finite_number',
    'round1',
]
