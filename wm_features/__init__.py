"""
Watermelon tap-sound feature extraction.

Turns a short mono recording into a fixed 53-slot acoustic descriptor vector.
"""

from .audio import (
    extract_features, analyze_samples, analyze_file,
    FeatureVector, FEATURE_NAMES, FEATURE_CATEGORIES,
)

__version__ = "1.0.0"

__all__ = [
    'extract_features', 'analyze_samples', 'analyze_file',
    'FeatureVector', 'FEATURE_NAMES', 'FEATURE_CATEGORIES',
]
