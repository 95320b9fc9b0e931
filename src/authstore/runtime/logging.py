import logging
import sys
from pathlib import Path

from loguru import logger

from authstore.runtime.config.config_data import LoggingConfig

FMT_PLAIN = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
    "<level>{message}</level>"
)


class InterceptHandler(logging.Handler):
    """Redirect standard 'logging' records to Loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        # depth=2: stdlib -> this handler -> caller
        logger.opt(depth=2, exception=record.exc_info).bind(
            logger_name=record.name
        ).log(level, record.getMessage())


def configure_logging(cfg: LoggingConfig, environment: str = "development") -> None:
    """Install console and file sinks and route stdlib logging into Loguru.

    Args:
        cfg: Logging configuration
        environment: Deployment environment; tracebacks are trimmed in production
    """
    logger.remove()

    backtrace_on = environment != "production"
    diagnose_on = environment != "production"
    is_json_file = cfg.format == "json"

    # Console: always human-readable
    logger.add(
        sys.stderr,
        level=cfg.level,
        format=FMT_PLAIN,
        colorize=True,
        serialize=False,
        backtrace=backtrace_on,
        diagnose=diagnose_on,
    )

    if cfg.file:
        path = Path(cfg.file)
        path.parent.mkdir(parents=True, exist_ok=True)
        logger.add(
            str(path),
            level=cfg.level,
            format="{message}" if is_json_file else FMT_PLAIN,
            serialize=is_json_file,
            rotation=f"{cfg.max_size_mb} MB",
            retention=cfg.backup_count,
            enqueue=True,
            backtrace=backtrace_on,
            diagnose=diagnose_on,
        )

    # level=0 lets all records through to Loguru, which applies its own levels
    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)

    # redis-py is chatty at DEBUG
    logging.getLogger("redis").setLevel(logging.WARNING)

    logger.info(
        "Logging configured",
        app_level=cfg.level,
        app_format=cfg.format,
        app_file=cfg.file,
        environment=environment,
    )
