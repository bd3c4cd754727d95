"""
Orderdesk Core
==============

Core utilities and shared functionality for Orderdesk modules.
"""

from .config import Config
from .database import Database
from .document_store import SanityClient, DocumentStoreError
from .logging_service import LoggingService

__all__ = ['Config', 'Database', 'SanityClient', 'DocumentStoreError', 'LoggingService']
