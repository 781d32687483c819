"""
Base Service Interface

Services take a typed request model and return a typed response model.
Failures are raised as ServiceError subclasses and translated to HTTP
status codes by the endpoint layer.
"""

from abc import ABC, abstractmethod
from typing import Generic, TypeVar

InputT = TypeVar("InputT")
OutputT = TypeVar("OutputT")


class BaseService(ABC, Generic[InputT, OutputT]):
    """
    Base class for request/response services.

    Subclasses provide a name for logs and error messages, an async
    `execute`, and a `health_check`. `validate_input` runs checks that
    pydantic cannot express (cross-field or history-length rules).
    """

    @property
    @abstractmethod
    def name(self) -> str:
        pass

    @abstractmethod
    async def execute(self, input_data: InputT) -> OutputT:
        """
        Run the service on a validated request.

        Raises:
            ServiceError: any failure the caller should map to a response
        """
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        pass

    def validate_input(self, input_data: InputT) -> InputT:
        """Schema validation already happened; override for domain rules."""
        return input_data


class ServiceError(Exception):
    """
    Base exception for service errors.

    `details` holds machine-readable context and is safe to return to clients.
    """

    def __init__(self, service_name: str, message: str, details: dict = None):
        self.service_name = service_name
        self.message = message
        self.details = details or {}
        super().__init__(f"[{service_name}] {message}")


class ValidationError(ServiceError):
    """Request is well-formed but cannot be processed (HTTP 400)."""
    pass


class InsufficientHistoryError(ValidationError):
    """Fewer candles than the configured indicators need (HTTP 422)."""
    pass


class ComputationError(ServiceError):
    """Unexpected failure inside an indicator computation."""
    pass


class ExternalAPIError(ServiceError):
    """Upstream API call failed."""
    pass
