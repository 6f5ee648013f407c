"""HTTP plumbing and the customer API client."""

from sus_client.clients.context import RequestContext, request_context
from sus_client.clients.errors import (
    ClientError,
    ErrorKind,
    ForbiddenError,
    ServerError,
    TransportError,
    UnauthorizedError,
)
from sus_client.clients.http_client import HttpClient
from sus_client.clients.rate_limiter import RateLimiter
from sus_client.clients.sus_client import SusClient

__all__ = [
    "ClientError",
    "ErrorKind",
    "ForbiddenError",
    "HttpClient",
    "RateLimiter",
    "RequestContext",
    "ServerError",
    "SusClient",
    "TransportError",
    "UnauthorizedError",
    "request_context",
]
