"""Runtime components: endpoint pipeline and pagination engine."""

from .pagination import Page, PaginationPolicy, Paginator
from .rest import Endpoint, EndpointRequest, RestEndpointSpec, RestRunner

__all__ = [
    "Endpoint",
    "EndpointRequest",
    "RestEndpointSpec",
    "RestRunner",
    "Page",
    "PaginationPolicy",
    "Paginator",
]
