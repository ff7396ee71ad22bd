import sys
import logging
from typing import Any

from loguru import logger

from player_number.config.settings import AppSettings

SENSITIVE_KEYS = ["key", "token", "password", "secret", "auth"]


def build_sensitive_data_filter(settings: AppSettings):
    """Builds a filter that masks configured secrets in log records."""
    secrets = [s for s in (settings.api_password, settings.supabase_key) if s]

    def mask(value: str) -> str:
        if len(value) > 8:
            return value[:4] + "****" + value[-4:]
        return "********"

    def sensitive_data_filter(record: dict[str, Any]) -> bool:
        # Explicit keys in the extra dict
        extra = record.get("extra")
        if isinstance(extra, dict):
            for extra_key, extra_value in extra.items():
                if isinstance(extra_value, str) and any(
                    sk in extra_key.lower() for sk in SENSITIVE_KEYS
                ):
                    extra[extra_key] = mask(extra_value)

        for secret in secrets:
            if secret in record["message"]:
                record["message"] = record["message"].replace(secret, "********")

        return True  # Keep the record after masking

    return sensitive_data_filter


class InterceptHandler(logging.Handler):
    """Routes standard logging records (httpx, uvicorn) into loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        # Get corresponding Loguru level if it exists
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        # Find caller from where originated the logged message
        frame, depth = logging.currentframe(), 2
        while frame and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(
            level, record.getMessage()
        )


def setup_logging(settings: AppSettings) -> None:
    """Configures Loguru logger based on application settings."""
    logger.remove()  # Remove default handler

    logger.add(
        sys.stderr,
        level=settings.log_level.upper(),
        format=(
            "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
            "<level>{level: <8}</level> | "
            "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
            "<level>{message}</level>"
        ),
        colorize=True,
        backtrace=True,
        diagnose=False,  # Locals may hold credentials
        filter=build_sensitive_data_filter(settings),
    )

    logger.info(f"Logging initialized with level: {settings.log_level}")

    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)
    logger.debug("Standard logging intercepted.")
