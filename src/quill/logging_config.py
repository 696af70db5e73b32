from __future__ import annotations

import logging

from quill.config import get_settings


_LOG_CONFIGURED = False


def configure_logging(level: str | None = None) -> None:
    global _LOG_CONFIGURED
    if _LOG_CONFIGURED:
        return

    settings = get_settings()
    level_name = (level or settings.log_level).upper()
    logging.basicConfig(
        level=getattr(logging, level_name, logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
    # urllib3 echoes request lines at DEBUG; storage requests carry signed paths.
    logging.getLogger("urllib3").setLevel(logging.WARNING)
    _LOG_CONFIGURED = True
