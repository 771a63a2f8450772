"""Application configuration.

AppConfig is a frozen dataclass: immutable after creation, IDE-autocompletable,
no string-key dict lookups.
"""

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True, slots=True)
class AppConfig:
    """Application configuration. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = AppConfig(debug=True, port=3000, public_dir=None)
    """

    # Server
    host: str = "127.0.0.1"
    port: int = 8000
    debug: bool = False
    workers: int = 1

    # Fallback content for unmatched requests (None disables it)
    public_dir: str | Path | None = "public"
    index_file: str = "index.html"

    # Limits
    max_content_length: int = 16 * 1024 * 1024  # 16 MB

    # Logging (applied by ``velix run``)
    log_level: str = "info"
