"""
Interfaces package for qiitasync.
"""

from .api_client import ApiClient

__all__ = ["ApiClient"]
