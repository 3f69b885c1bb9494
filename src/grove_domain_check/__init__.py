"""
grove-domain-check: fast, conservative domain availability verification.

A DNS-over-HTTPS pre-filter rejects obviously registered domains cheaply,
RDAP gives the authoritative answer, and a short-lived cache keeps bulk
checks inside upstream rate limits.
"""

__version__ = "0.1.0"
__author__ = "Autumn Brown"
__email__ = "autumn@grove.place"

from .cache import TTLCache
from .checker import (
    AvailabilityResult,
    DomainVerifier,
    normalize_domain,
    verify_domain,
    verify_domains,
)
from .config import config
from .doh import DNSSignal, check_dns
from .errors import (
    DomainCheckError,
    ServerNotRunningError,
    ServiceError,
    ToolArgumentError,
    ToolError,
    ToolNotFoundError,
    UnknownServiceError,
)
from .lifecycle import (
    ServiceGuard,
    ensure_domain_check_server,
    get_service,
    is_domain_check_server_running,
    register_service,
    shutdown_domain_check_server,
)
from .rdap import RDAPSignal, check_rdap
from .server import DomainCheckServer

__all__ = [
    # Core checker
    "verify_domain",
    "verify_domains",
    "normalize_domain",
    "DomainVerifier",
    "AvailabilityResult",
    # Signals
    "check_dns",
    "check_rdap",
    "DNSSignal",
    "RDAPSignal",
    # Cache
    "TTLCache",
    # Config
    "config",
    # Server and lifecycle
    "DomainCheckServer",
    "ServiceGuard",
    "register_service",
    "get_service",
    "ensure_domain_check_server",
    "shutdown_domain_check_server",
    "is_domain_check_server_running",
    # Errors
    "DomainCheckError",
    "ToolError",
    "ToolNotFoundError",
    "ToolArgumentError",
    "ServiceError",
    "ServerNotRunningError",
    "UnknownServiceError",
]
