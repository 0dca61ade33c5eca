"""Session credential storage.

The store owns the single bearer credential obtained at login and is injected
into the auth client, so tests can substitute the in-memory variant.
"""

from .store import CredentialStore, FileCredentialStore, InMemoryCredentialStore, StorageError

__all__ = [
    "CredentialStore",
    "FileCredentialStore",
    "InMemoryCredentialStore",
    "StorageError",
]
