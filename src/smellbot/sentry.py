import sentry_sdk
from sentry_sdk.integrations.fastapi import FastApiIntegration
from sentry_sdk.integrations.starlette import StarletteIntegration

from smellbot.common.logging_config import get_logger
from smellbot.config import SentrySettings

logger = get_logger(__name__)


def init(sentry_settings: SentrySettings) -> bool:
    """Initialise error reporting. Returns False when no DSN is configured."""
    if not sentry_settings.dsn:
        logger.info("No Sentry DSN configured, error reporting disabled")
        return False
    sentry_sdk.init(
        dsn=sentry_settings.dsn,
        environment=sentry_settings.environment,
        release=sentry_settings.release,
        attach_stacktrace=True,
        traces_sample_rate=0.0,
        integrations=[
            StarletteIntegration(
                transaction_style="endpoint",
                failed_request_status_codes=[403, range(500, 599)],
            ),
            FastApiIntegration(
                transaction_style="endpoint",
                failed_request_status_codes=[403, range(500, 599)],
            ),
        ],
    )
    return True
