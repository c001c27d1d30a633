# deepstoker/utils/__init__.py
"""Utility modules for the reactor engine."""

from .errors import *
from .logger import setup_logging

__all__ = ['errors', 'setup_logging']
