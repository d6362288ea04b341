"""
Configuration package for watermelon tap-sound feature extraction.
"""

from .config import Config, DEFAULT_CONFIG, FEATURE_VECTOR_LENGTH, MFCC_COUNT, LOG_LEVELS

__all__ = ['Config', 'DEFAULT_CONFIG', 'FEATURE_VECTOR_LENGTH', 'MFCC_COUNT', 'LOG_LEVELS']
