"""
fissionctl - typed client and CRUD API for Fission resources stored in a
cluster object store.

Usage:
    from fissionctl import FissionClients, ResourceIdentity, configure_transport, load_rest_config

    rest = configure_transport(load_rest_config())
    clients = FissionClients.for_namespace(rest, "default")
    env = clients.environments.get(ResourceIdentity(name="python"))
"""

from .clients import FissionClients, ResourceClient, WatchEvent, WatchStream
from .config import RestConfig, load_rest_config
from .errors import (
    ConfigurationError,
    ConflictError,
    FissionError,
    NotFoundError,
    SerializationError,
    TransportError,
    ValidationError,
)
from .identity import ResourceIdentity, identity_of
from .scheme import FISSION_GROUP_VERSION, GroupVersion, Scheme, build_scheme
from .transport import RESTClient, configure_transport

__version__ = "0.1.0"
__all__ = [
    "ConfigurationError",
    "ConflictError",
    "FISSION_GROUP_VERSION",
    "FissionClients",
    "FissionError",
    "GroupVersion",
    "NotFoundError",
    "RESTClient",
    "ResourceClient",
    "ResourceIdentity",
    "RestConfig",
    "Scheme",
    "SerializationError",
    "TransportError",
    "ValidationError",
    "WatchEvent",
    "WatchStream",
    "build_scheme",
    "configure_transport",
    "identity_of",
    "load_rest_config",
]
