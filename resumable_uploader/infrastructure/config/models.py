"""
Configuration models and data structures.

This module defines the configuration models used throughout the application,
providing type safety and validation for configuration values.
"""

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, Optional
from urllib.parse import urlparse

DEFAULT_CHUNK_SIZE = 512 * 1024
DEFAULT_PROGRESS_STEP = 64 * 1024

LOG_LEVELS = ("TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL")
DEFAULT_LOG_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
    "<level>{message}</level>"
)


@dataclass
class ServerConfig:
    """Upload server endpoint configuration."""
    base_url: str = "http://localhost:8080"
    status_path: str = "/status"
    upload_path: str = "/upload"
    list_path: str = "/list"
    download_path: str = "/download"
    timeout: float = 300.0
    connect_timeout: float = 10.0
    verify_ssl: bool = True
    headers: Dict[str, str] = field(default_factory=dict)


@dataclass
class UploadConfig:
    """Chunking configuration."""
    chunk_size: int = DEFAULT_CHUNK_SIZE
    progress_step: int = DEFAULT_PROGRESS_STEP


@dataclass
class LoggingConfig:
    """Logging configuration."""
    level: str = "INFO"
    format: str = DEFAULT_LOG_FORMAT
    log_directory: str = "logs"
    max_file_size: str = "10MB"
    backup_count: int = 5
    console_enabled: bool = True
    file_enabled: bool = False


@dataclass
class ApplicationConfig:
    """Main application configuration."""

    name: str = "Resumable Uploader"
    version: str = "0.1.0"
    debug: bool = False

    server: ServerConfig = field(default_factory=ServerConfig)
    upload: UploadConfig = field(default_factory=UploadConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    config_file_path: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        self.validate()

    def validate(self) -> None:
        """
        Validate the configuration.

        Raises:
            ValueError: If a value is out of range
        """
        self._validate_server()
        self._validate_sizes()
        self._validate_logging()

    def _validate_server(self) -> None:
        parsed = urlparse(self.server.base_url)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise ValueError(
                f"Server URL must be an http(s) URL, got {self.server.base_url!r}")

        timeouts = [
            ("Server timeout", self.server.timeout),
            ("Server connect timeout", self.server.connect_timeout),
        ]
        for name, timeout in timeouts:
            if timeout <= 0:
                raise ValueError(f"{name} must be positive, got {timeout}")

    def _validate_sizes(self) -> None:
        sizes = [
            ("Chunk size", self.upload.chunk_size),
            ("Progress step", self.upload.progress_step),
            ("Log backup count", self.logging.backup_count),
        ]
        for name, value in sizes:
            if value <= 0:
                raise ValueError(f"{name} must be positive, got {value}")

    def _validate_logging(self) -> None:
        if str(self.logging.level).upper() not in LOG_LEVELS:
            raise ValueError(
                f"Log level must be one of {', '.join(LOG_LEVELS)}, got {self.logging.level!r}")

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ApplicationConfig':
        """Create configuration from dictionary."""
        server_config = ServerConfig(**data.get('server', {}))
        upload_config = UploadConfig(**data.get('upload', {}))
        logging_config = LoggingConfig(**data.get('logging', {}))

        return cls(
            name=data.get('name', 'Resumable Uploader'),
            version=data.get('version', '0.1.0'),
            debug=data.get('debug', False),
            server=server_config,
            upload=upload_config,
            logging=logging_config,
            config_file_path=data.get('config_file_path'),
        )
