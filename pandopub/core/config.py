"""
Publisher configuration module.

Provides configuration for the publishing pipeline and its HTTP client.
The master secret is deliberately not part of this tree; it is passed
explicitly to each run.
"""
from dataclasses import dataclass, field
from typing import Optional, Dict, Any, Tuple
from urllib.parse import urljoin
import logging
import ssl

DEFAULT_ENDPOINT = 'https://api.pndo.xyz'
DEFAULT_PATH_PREFIX = '/v0/api/content/kbt/'


@dataclass
class SSLConfig:
    """
    SSL/TLS configuration for the upload endpoint.
    """
    verify: bool = True
    ca_file: Optional[str] = None

    def create_ssl_context(self):
        """Create SSL context from configuration."""
        if not self.verify:
            return False  # Disable SSL verification

        context = ssl.create_default_context()
        if self.ca_file:
            context.load_verify_locations(self.ca_file)
        return context


@dataclass
class TimeoutConfig:
    """
    Timeout configuration.

    Applies per HTTP attempt, not per item.
    """
    total: float = 300.0  # Total request timeout
    connect: float = 30.0  # Connection timeout
    sock_read: float = 60.0  # Socket read timeout
    sock_connect: float = 30.0  # Socket connect timeout

    def to_aiohttp_timeout(self):
        """Convert to aiohttp ClientTimeout."""
        import aiohttp
        return aiohttp.ClientTimeout(
            total=self.total,
            connect=self.connect,
            sock_read=self.sock_read,
            sock_connect=self.sock_connect
        )


@dataclass
class RetryConfig:
    """
    Retry configuration for the upload step.

    Fixed attempt count with a fixed delay between attempts. Network
    errors and statuses in ``retry_on_status`` are retried; everything
    else fails the item immediately.
    """
    attempts: int = 3
    delay: float = 0.5
    retry_on_status: Tuple[int, ...] = tuple(range(500, 600))

    def should_retry(self, status: Optional[int], attempt: int) -> bool:
        """
        Check whether another attempt is allowed.

        Args:
            status: HTTP status of the failed attempt, None for network errors
            attempt: 1-based number of the attempt that just failed
        """
        if attempt >= self.attempts:
            return False
        return status is None or status in self.retry_on_status

    def calculate_delay(self, attempt: int) -> float:
        """Delay before the attempt following ``attempt`` (constant)."""
        return self.delay


@dataclass
class ArchiverConfig:
    """
    External directory archiver configuration.

    ``command`` is the argv prefix used to reach the ``ipfs-car`` tool,
    e.g. ``("ipfs-car",)`` or ``("npx", "ipfs-car")``.
    """
    command: Tuple[str, ...] = ('ipfs-car',)
    extra_args: Tuple[str, ...] = ()


@dataclass
class PublisherConfig:
    """
    Complete publisher configuration.

    Centralizes endpoint, HTTP and archiver options.
    """
    endpoint: str = DEFAULT_ENDPOINT
    path_prefix: str = DEFAULT_PATH_PREFIX

    user_agent: str = 'pandopub/1.0.0'

    ssl: SSLConfig = field(default_factory=SSLConfig)
    timeout: TimeoutConfig = field(default_factory=TimeoutConfig)
    retry: RetryConfig = field(default_factory=RetryConfig)
    archiver: ArchiverConfig = field(default_factory=ArchiverConfig)

    extra_headers: Dict[str, str] = field(default_factory=dict)

    log_level: int = logging.INFO

    @classmethod
    def default(cls) -> 'PublisherConfig':
        """Create default configuration."""
        return cls()

    @classmethod
    def for_endpoint(cls, endpoint: str, **kwargs) -> 'PublisherConfig':
        """Create configuration targeting another endpoint."""
        return cls(endpoint=endpoint, **kwargs)

    def build_url(self, content_address: str) -> str:
        """
        Build the upload URL for a content address.

        The prefix is absolute, so any path on the endpoint is replaced:
        ``https://host/x`` + ``k51...`` -> ``https://host/v0/api/content/kbt/k51...``
        """
        base = urljoin(self.endpoint, self.path_prefix)
        return urljoin(base, content_address)

    def get_connector_kwargs(self) -> Dict[str, Any]:
        """Get kwargs for aiohttp TCPConnector."""
        return {
            'ssl': self.ssl.create_ssl_context(),
        }

    def get_session_kwargs(self) -> Dict[str, Any]:
        """Get kwargs for aiohttp ClientSession."""
        headers = {
            'User-Agent': self.user_agent,
            **self.extra_headers
        }

        return {
            'headers': headers,
            'timeout': self.timeout.to_aiohttp_timeout(),
        }
