"""Signed client for the Amazon Product Advertising REST API."""

from .client import Amazonian, create_client
from .configuration import Configuration, load_configuration
from .exceptions import AmazonianError, ConfigurationError, RequestError, TransportError
from .models import Item, Search

__all__ = [
    "Amazonian",
    "AmazonianError",
    "Configuration",
    "ConfigurationError",
    "Item",
    "RequestError",
    "Search",
    "TransportError",
    "create_client",
    "load_configuration",
]
