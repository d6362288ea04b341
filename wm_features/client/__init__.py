"""
Client for the remote watermelon prediction service.
"""

from .prediction_client import (
    PredictionClient, PredictionResponse, ServerHealthResponse,
    SupportedFormatsResponse, ErrorResponse, get_mime_type,
)

__all__ = [
    'PredictionClient', 'PredictionResponse', 'ServerHealthResponse',
    'SupportedFormatsResponse', 'ErrorResponse', 'get_mime_type',
]
