"""firemock: an in-memory, deterministic realtime-database client for tests."""

from firemock.client import MockClient
from firemock.config import ClientConfig
from firemock.core.auth import AuthResult
from firemock.core.events import EventType, Listener
from firemock.core.queue import OperationKind
from firemock.core.snapshot import Snapshot
from firemock.errors import FiremockError, InvalidDataError, InvalidPathError
from firemock.fixtures import DEFAULT_DATA

__version__ = "0.1.0"

__all__ = [
    "AuthResult",
    "ClientConfig",
    "DEFAULT_DATA",
    "EventType",
    "FiremockError",
    "InvalidDataError",
    "InvalidPathError",
    "Listener",
    "MockClient",
    "OperationKind",
    "Snapshot",
]
