"""
Errors raised by SleepReport providers.

Only the remote path can fail; the local scoring engine is total. Every error
carries a technical message for logs and a generic, retryable message that is
safe to show to the user.
"""

from typing import Any, Dict, Optional

GENERIC_USER_MESSAGE = "Failed to generate report. Please check your connection and try again."


class AnalysisError(Exception):
    """Base class for failures while producing a SleepReport"""

    def __init__(
        self,
        message: str,
        provider: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        cause: Optional[Exception] = None,
    ):
        super().__init__(message)
        self.message = message
        self.provider = provider
        self.context = context or {}
        self.cause = cause
        self.user_message = GENERIC_USER_MESSAGE

    def to_dict(self) -> Dict[str, Any]:
        return {
            "error": self.__class__.__name__,
            "message": self.message,
            "user_message": self.user_message,
            "provider": self.provider,
            "context": self.context,
        }


class RemoteConfigurationError(AnalysisError):
    """Remote provider selected but credentials are missing"""


class RemoteRequestError(AnalysisError):
    """Transport failure or non-2xx answer from the remote model"""


class RemotePayloadError(AnalysisError):
    """Remote answer could not be turned into a SleepReport"""
