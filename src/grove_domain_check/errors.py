"""
Exceptions for grove-domain-check

Per-domain lookup failures never raise; they are folded into
AvailabilityResult. These cover tool dispatch and service lifecycle.
"""


class DomainCheckError(Exception):
    """Base exception for grove-domain-check."""
    pass


class ToolError(DomainCheckError):
    """Tool dispatch failed."""
    pass


class ToolNotFoundError(ToolError):
    """No tool registered under the requested name."""
    pass


class ToolArgumentError(ToolError):
    """Tool arguments failed validation."""
    pass


class ServiceError(DomainCheckError):
    """Service lifecycle failure."""
    pass


class ServerNotRunningError(ServiceError):
    """The server was used before it was started."""
    pass


class UnknownServiceError(ServiceError):
    """No service family registered under the requested name."""
    pass
