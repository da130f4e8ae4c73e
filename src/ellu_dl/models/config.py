"""Application configuration with Pydantic Settings."""

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ElluConfig(BaseSettings):
    """Application configuration with environment variable support.

    Configuration can be set via:
    1. Environment variables (prefixed with ELLU_)
    2. .env file
    3. Direct instantiation

    Example:
        export ELLU_COOKIE=0123456789abcdef
        export ELLU_OUTPUT_DIR=/path/to/books

        config = ElluConfig()
        print(config.output_dir)  # /path/to/books
    """

    model_config = SettingsConfigDict(
        env_prefix="ELLU_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Authentication
    cookie: str | None = Field(default=None, description="Value of the reader session cookie")
    cookie_name: str = Field(default="sid", description="Name of the reader session cookie")

    # Reader settings
    preview: bool = Field(
        default=False, description="Read from /reader-preview instead of /reader"
    )
    static_prefix: str = Field(
        default="/static/", description="Path prefix of embedded static assets (images)"
    )

    # HTTP settings
    timeout: int = Field(default=30, ge=1, le=300, description="HTTP request timeout in seconds")
    user_agent: str = Field(default="ellu-dl/1.0", description="User-Agent header for requests")

    # Paths
    output_dir: Path = Field(
        default=Path("./Books"), description="Output directory for generated EPUB files"
    )

    # Logging
    log_level: str = Field(
        default="INFO", description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )
    log_file: Path | None = Field(default=None, description="Optional log file path")

    def validate_paths(self) -> None:
        """Validate and create necessary paths."""
        self.output_dir.mkdir(parents=True, exist_ok=True)
