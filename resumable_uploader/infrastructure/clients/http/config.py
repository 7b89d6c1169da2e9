"""
HTTP client configuration for the upload server client.
"""

from dataclasses import dataclass
from urllib.parse import urlparse

from ...config.models import ServerConfig
from ..base import ClientConfig


@dataclass
class HttpClientConfig(ClientConfig):
    """Upload server client configuration."""

    status_path: str = "/status"
    upload_path: str = "/upload"
    list_path: str = "/list"
    download_path: str = "/download"

    def __post_init__(self) -> None:
        """Post-initialization validation."""
        parsed = urlparse(self.base_url)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise ValueError(f"Base URL must be an http(s) URL, got {self.base_url!r}")
        if self.timeout <= 0:
            raise ValueError("Timeout must be positive")
        if self.connect_timeout <= 0:
            raise ValueError("Connect timeout must be positive")

    @classmethod
    def from_server_config(cls, server: ServerConfig) -> 'HttpClientConfig':
        """Build client settings from the application's server section."""
        return cls(
            base_url=server.base_url,
            timeout=server.timeout,
            connect_timeout=server.connect_timeout,
            verify_ssl=server.verify_ssl,
            headers=dict(server.headers),
            status_path=server.status_path,
            upload_path=server.upload_path,
            list_path=server.list_path,
            download_path=server.download_path,
        )
