"""Encrypted key-value secret store."""

from .backends import Backend, DirectoryBackend, YAMLBackend
from .config import Config
from .crypto import AESGCMEncrypter, Encrypter
from .errors import (
    AuthenticationFailure,
    ConfigurationError,
    DecodingError,
    HipsError,
    InvalidLayout,
    NotFound,
    StorageError,
    TemplateError,
    UnsupportedFormat,
)
from .rotation import rotate
from .schema import Encrypted, Secret
from .store import Store, open_store

__all__ = [
    "AESGCMEncrypter",
    "AuthenticationFailure",
    "Backend",
    "Config",
    "ConfigurationError",
    "DecodingError",
    "DirectoryBackend",
    "Encrypted",
    "Encrypter",
    "HipsError",
    "InvalidLayout",
    "NotFound",
    "Secret",
    "StorageError",
    "Store",
    "TemplateError",
    "UnsupportedFormat",
    "YAMLBackend",
    "open_store",
    "rotate",
]
