"""
Data models for the upload module.
"""
import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

from ..crypto import Base64Encoder, Ed25519Keypair
from ..exceptions import PublishError
from ..packaging import PackagingMode, Payload


@dataclass
class PublishMetadata:
    """
    Metadata sent alongside the payload in the ``X-Metadata`` header.
    
    Example:
        >>> PublishMetadata(True, "a.json", "data/a.json", PackagingMode.DAG).to_header()
        '{"published": true, "human": "a.json", "path": "data/a.json", "as": "dag"}'
    """
    published: bool
    human: str
    path: str
    mode: PackagingMode
    
    def to_dict(self) -> Dict[str, Any]:
        return {
            'published': self.published,
            'human': self.human,
            'path': self.path,
            'as': self.mode.value,
        }
    
    def to_header(self) -> str:
        """JSON encoding for the request header."""
        return json.dumps(self.to_dict())


@dataclass
class UploadItem:
    """
    One unit of work: a packaged entry and everything needed to send it.
    """
    path: str
    human_name: str
    mode: PackagingMode
    keypair: Ed25519Keypair
    content_address: str
    metadata: PublishMetadata
    payload: Payload
    
    @property
    def signature(self) -> str:
        """Base64 of the protobuf publishing public key (``X-Signature``)."""
        return Base64Encoder.encode(self.keypair.marshal_public_key())


@dataclass
class UploadResult:
    """
    Outcome of one item: the remote acknowledgment or the error that ended it.
    """
    path: str
    mode: Optional[PackagingMode] = None
    human_name: Optional[str] = None
    content_address: Optional[str] = None
    response: Any = None
    error: Optional[PublishError] = None
    
    @property
    def ok(self) -> bool:
        """True if the item was acknowledged."""
        return self.error is None
    
    def to_dict(self) -> Any:
        """Acknowledgment body on success, error indicator otherwise."""
        if self.ok:
            return self.response
        return {
            'error': str(self.error),
            'type': type(self.error).__name__,
            'path': self.path,
            'as': self.mode.value if self.mode else None,
        }
