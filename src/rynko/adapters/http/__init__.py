"""HTTP adapter – authenticated async API transport."""
from rynko.adapters.http.client import USER_AGENT, HttpClient, HttpxHttpClient, build_headers, encode_query
from rynko.adapters.http.retry_client import RetryingHttpClient

__all__ = [
    "USER_AGENT",
    "HttpClient",
    "HttpxHttpClient",
    "RetryingHttpClient",
    "build_headers",
    "encode_query",
]
