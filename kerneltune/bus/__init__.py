"""
Service Bus Layer

- registry.py - Method name to handler table and reply convention
- codec.py - Request parsing and reply serialisation
- server.py - aiohttp front end serving the registry
- client.py - httpx client for nested calls to peer services
"""

from .client import BusClient
from .codec import decode_request, encode_reply
from .registry import MethodRegistry
from .server import BusServer

__all__ = [
    "BusClient",
    "BusServer",
    "MethodRegistry",
    "decode_request",
    "encode_reply",
]
