"""
Custom exceptions for publishing operations.

Every per-item failure is one of these, so the pipeline can isolate it
into a failed result instead of aborting the batch.
"""
from typing import Optional


class PublishError(Exception):
    """Base exception for all publishing errors."""
    
    def __init__(
        self,
        message: str,
        path: Optional[str] = None,
        mode: Optional[str] = None
    ) -> None:
        """
        Initialize the exception.
        
        Args:
            message: Error message
            path: Filesystem path of the item being published (if known)
            mode: Packaging mode of the item (if known)
        """
        self.path = path
        self.mode = mode
        super().__init__(message)


class KeyDerivationError(PublishError):
    """Raised when the master secret cannot be decoded or a key cannot be derived."""
    pass


class UnsupportedNameSpecError(PublishError):
    """Raised for an unknown human name spec."""
    pass


class InvalidSpecError(PublishError):
    """Raised when the packaging mode does not fit the filesystem entry."""
    pass


class PackagingError(PublishError):
    """Raised when a payload cannot be parsed or archived."""
    pass


class UploadError(PublishError):
    """Raised when delivery fails after exhausting retries."""
    
    def __init__(
        self,
        message: str,
        url: Optional[str] = None,
        status: Optional[int] = None,
        attempts: int = 0,
        path: Optional[str] = None,
        mode: Optional[str] = None
    ) -> None:
        """
        Initialize the exception.
        
        Args:
            message: Error message
            url: Target URL of the failed request
            status: Last HTTP status received (None for network errors)
            attempts: Number of attempts made
            path: Filesystem path of the item
            mode: Packaging mode of the item
        """
        self.url = url
        self.status = status
        self.attempts = attempts
        super().__init__(message, path=path, mode=mode)


class ResourceError(PublishError):
    """Raised when a temporary file or descriptor cannot be released."""
    pass
