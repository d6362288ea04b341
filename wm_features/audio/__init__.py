"""
Audio processing module for watermelon tap-sound feature extraction.
"""

from .feature_extraction import (
    extract_features, analyze_samples, analyze_file,
    AudioFeatureExtractor, FeatureVector, FEATURE_VECTOR_LENGTH,
)
from .feature_names import FEATURE_NAMES, FEATURE_CATEGORIES
from .preprocessing import preprocess

__all__ = [
    'extract_features', 'analyze_samples', 'analyze_file',
    'AudioFeatureExtractor', 'FeatureVector', 'FEATURE_VECTOR_LENGTH',
    'FEATURE_NAMES', 'FEATURE_CATEGORIES', 'preprocess',
]
