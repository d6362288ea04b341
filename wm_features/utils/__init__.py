"""
Utility functions and classes for watermelon tap-sound feature extraction.
"""

from .logger import setup_logger, get_logger, LoggerMixin

__all__ = ['setup_logger', 'get_logger', 'LoggerMixin']
