"""
Catalog Session Layer.

This package defines the interfaces of the streaming catalog services and
loads the configured session backend.
"""

from .session import CatalogSession, RemoteAudioFile, load_backend, open_session

__all__ = ["CatalogSession", "RemoteAudioFile", "load_backend", "open_session"]
