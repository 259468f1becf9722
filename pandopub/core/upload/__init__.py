"""
Upload module.

Delivers packaged items to the content API with signed metadata headers
and a fixed-delay retry policy.
"""
from .models import PublishMetadata, UploadItem, UploadResult
from .retry import RetryStrategy, FixedDelayStrategy
from .uploader import Uploader

__all__ = [
    'PublishMetadata',
    'UploadItem',
    'UploadResult',
    'RetryStrategy',
    'FixedDelayStrategy',
    'Uploader',
]
