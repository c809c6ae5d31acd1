"""
Clients for services outside this process.
"""

from .api_client import SnakeApiClient, ApiError, UnauthenticatedError, ALL_MODES

__all__ = ['SnakeApiClient', 'ApiError', 'UnauthenticatedError', 'ALL_MODES']
