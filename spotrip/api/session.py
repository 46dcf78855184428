"""
Interfaces of the streaming catalog services that spotrip drives.

Authentication, the catalog wire protocol, key exchange, chunked audio fetching
and decryption all live behind a `CatalogSession`. A backend module provides a
factory returning an object that implements it; the CLI loads that factory
from the `backend` setting.
"""

import importlib
import inspect
import logging
from typing import Any, BinaryIO, Protocol, runtime_checkable

from spotrip.exceptions import ConfigurationError, SessionError
from spotrip.models.catalog import AlbumDescriptor, TrackDescriptor
from spotrip.models.config import DownloadConfig

log = logging.getLogger(__name__)


@runtime_checkable
class RemoteAudioFile(Protocol):
    """An encrypted, range-addressable remote audio object."""

    size: int

    def read(self, size: int = -1) -> bytes: ...

    def seek(self, offset: int, whence: int = 0) -> int: ...

    def tell(self) -> int: ...


@runtime_checkable
class CatalogSession(Protocol):
    """An authenticated connection to the streaming catalog."""

    async def resolve_album(self, album_id: str) -> AlbumDescriptor: ...

    async def resolve_track(self, track_ref: str) -> TrackDescriptor: ...

    async def open_audio_file(
        self, file_id: str, bytes_per_second: int
    ) -> RemoteAudioFile: ...

    async def request_audio_key(self, track_id: str, file_id: str) -> bytes: ...

    def decrypt(self, key: bytes | None, audio_file: RemoteAudioFile) -> BinaryIO:
        """
        Wraps an audio file in a readable, seekable plaintext stream.
        Without a key the ciphertext is passed through unchanged.
        """
        ...

    async def close(self) -> None: ...


def load_backend(spec: str) -> Any:
    """Imports the session factory named by a 'package.module:callable' string."""
    if not spec:
        raise ConfigurationError(
            "No session backend configured. Set 'backend' in the config file "
            "or pass --backend."
        )
    module_name, _, attr = spec.partition(":")
    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        raise ConfigurationError(
            f"Could not import session backend '{module_name}': {e}"
        ) from e
    factory = getattr(module, attr, None)
    if not callable(factory):
        raise ConfigurationError(
            f"Session backend '{spec}' does not name a callable factory."
        )
    return factory


async def open_session(config: DownloadConfig) -> CatalogSession:
    """
    Creates a catalog session from the configured backend factory.

    Raises:
        ConfigurationError: If the backend cannot be loaded.
        SessionError: If the backend fails to connect or authenticate.
    """
    factory = load_backend(config.backend)
    log.info("Connecting...")
    try:
        session = factory(config)
        if inspect.isawaitable(session):
            session = await session
    except SessionError:
        raise
    except Exception as e:
        raise SessionError(f"Error connecting: {e}") from e

    if not isinstance(session, CatalogSession):
        raise SessionError(
            f"Backend '{config.backend}' returned {type(session).__name__}, "
            "which is not a catalog session."
        )
    log.debug(f"Session created by backend '{config.backend}'")
    return session
