"""Service settings using pydantic-settings."""

from pydantic import Field
from pydantic_settings import BaseSettings


class PostQuerySettings(BaseSettings):
    """Settings for the query side.

    All settings can be configured via environment variables with the
    POSTQUERY_ prefix. For example:
    - POSTQUERY_LOG_LEVEL=DEBUG
    - POSTQUERY_QUERY_TIMEOUT_SECONDS=2.5

    Attributes:
        log_level: Level at which every received query is logged.
        query_timeout_seconds: Deadline applied to each query served by the
            lookup service. None means no deadline.
        correlation_tracking: If True, register the context propagation
            middleware so log records carry correlation IDs.
        logging_enabled: If True, register the query logging middleware.
    """

    log_level: str = "INFO"
    query_timeout_seconds: float | None = Field(default=None, gt=0)
    correlation_tracking: bool = True
    logging_enabled: bool = True

    model_config = {"env_prefix": "POSTQUERY_"}
