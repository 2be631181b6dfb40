"""Code client -- connectivity check entry point.

Startup sequence:
    1. Load logging configuration (needed for log_dir and rotation)
    2. Setup logging (must happen before any code that logs)
    3. Load client configuration (endpoints, identity, retry budget)
    4. Fetch the supported-files filters from the service
    5. Report readiness (supported extensions and config files)

Bundle upload and analysis are driven by the embedding tool, not here.
"""

import asyncio
import logging
import sys

from code_client.bundle import get_filters
from code_client.config import ClientSettings, LoggingSettings
from code_client.logging import setup_logging
from code_client.transport import RequestExecutor, set_default_executor

logger = logging.getLogger(__name__)


async def _fetch_filters(settings: ClientSettings) -> int:
    # Client calls below fall back to this executor.
    executor = RequestExecutor.from_settings(settings)
    set_default_executor(executor)
    try:
        result = await get_filters(
            settings.base_url,
            settings.source,
            attempts=settings.max_retry_attempts,
            request_id=settings.request_id,
        )
    finally:
        await executor.aclose()
        set_default_executor(None)

    if not result.is_success:
        logger.error(
            "Filters request failed -- %s (%s): %s",
            result.error.api_name,
            int(result.error.status_code),
            result.error.status_text,
        )
        return 1

    filters = result.value or {}
    logger.info(
        "Service ready -- %d extension(s), %d config file(s) supported",
        len(filters.get("extensions", [])),
        len(filters.get("configFiles", [])),
    )
    return 0


def main() -> int:
    """Check connectivity to the configured analysis service."""
    # 1-2. Logging first
    log_settings = LoggingSettings()
    setup_logging(
        log_dir=log_settings.log_dir,
        max_bytes=log_settings.log_max_bytes,
        backup_count=log_settings.log_backup_count,
    )

    logger.info("Code client starting")

    # 3. Client configuration -- never log session_token
    settings = ClientSettings()
    logger.info(
        "Config loaded -- base_url=%s, auth_host=%s, source=%s, org=%s",
        settings.base_url,
        settings.auth_host,
        settings.source,
        settings.org,
    )
    logger.info(
        "Config loaded -- timeout=%ss, max_retries=%s, retry_delay=%ss",
        settings.request_timeout_seconds,
        settings.max_retry_attempts,
        settings.retry_delay_seconds,
    )

    # 4-5. Filters
    return asyncio.run(_fetch_filters(settings))


if __name__ == "__main__":
    sys.exit(main())
