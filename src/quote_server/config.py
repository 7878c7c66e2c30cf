"""Settings for the quote API server, taken from ``SERVER_*`` env vars.

Every field has a local-development default, so ``quote-server`` runs with
no configuration at all.
"""

import os
from dataclasses import dataclass, field


def _split_origins(raw: str) -> list[str]:
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


@dataclass(frozen=True)
class ServerSettings:
    """Server settings, fixed for the lifetime of the process."""

    host: str = "0.0.0.0"
    port: int = 8080

    # Allowed browser origins; ["*"] while developing the quote portal
    cors_origins: list[str] = field(default_factory=lambda: ["*"])

    # None means the bundled v1/templates directory
    template_dir: str | None = None

    log_level: str = "INFO"


def load_settings() -> ServerSettings:
    """Read :class:`ServerSettings` from the environment.

    ``SERVER_CORS_ORIGINS`` is a comma-separated list.
    """
    return ServerSettings(
        host=os.getenv("SERVER_HOST", ServerSettings.host),
        port=int(os.getenv("SERVER_PORT", str(ServerSettings.port))),
        cors_origins=_split_origins(os.getenv("SERVER_CORS_ORIGINS", "*")),
        template_dir=os.getenv("SERVER_TEMPLATE_DIR") or None,
        log_level=os.getenv("SERVER_LOG_LEVEL", ServerSettings.log_level).upper(),
    )
