"""
Error kinds for kcm.

Every failure surfaced to a caller is one of these. Errors raised by the
mutation engine carry the aborted OperationResult as ``result``.
"""

from typing import Any, Optional


class KubeconfigError(Exception):
    """Base class for all kcm failures."""

    def __init__(self, message: str, result: Optional[Any] = None):
        super().__init__(message)
        self.result = result


class ParseError(KubeconfigError):
    """Raised when a kubeconfig document is malformed."""
    pass


class NotFound(KubeconfigError):
    """Raised when a referenced context, cluster or user is absent."""
    pass


class StoreUnavailable(KubeconfigError):
    """Raised when the backing file is missing, unreadable or unwritable."""
    pass


class ApplyFailed(KubeconfigError):
    """Raised when kubectl returns an error or times out."""
    pass
