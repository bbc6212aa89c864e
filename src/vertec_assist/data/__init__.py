"""Loading of the Vertec model from the remote API."""

from vertec_assist.data.client import ModelApiClient
from vertec_assist.data.provider import SchemaProvider

__all__ = [
    "ModelApiClient",
    "SchemaProvider",
]
