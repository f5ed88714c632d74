"""
Service layer exceptions.
"""


class ServiceError(Exception):
    """Base exception for service layer errors."""

    def __init__(self, message: str, service_id: str | None = None):
        self.service_id = service_id
        super().__init__(message)


class RequestTimeoutError(ServiceError):
    """A single attempt exceeded its time budget."""

    def __init__(self, service_id: str, timeout: float):
        self.timeout = timeout
        super().__init__(
            f"Request to service '{service_id}' timed out after {timeout}s",
            service_id=service_id,
        )


class UpstreamStatusError(ServiceError):
    """Upstream answered with a non-success status code."""

    def __init__(self, service_id: str, status_code: int, reason: str = ""):
        self.status_code = status_code
        msg = f"Response status code does not indicate success: {status_code}"
        if reason:
            msg += f" ({reason})"
        super().__init__(msg, service_id=service_id)


class EndpointNotConfiguredError(ServiceError):
    """Endpoint has no credential and cannot be called."""

    def __init__(self, service_id: str):
        super().__init__(f"{service_id} is not configured", service_id=service_id)
