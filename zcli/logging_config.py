import logging
import logging.handlers
from pathlib import Path
from typing import Optional, Union
from functools import wraps
import time

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

# Configure logging
def setup_logging(name: str, log_dir: Optional[Union[str, Path]] = None,
                  level: Union[int, str] = logging.INFO, console: bool = True) -> logging.Logger:
    logger = logging.getLogger(name)
    logger.setLevel(level)

    # Repeated setup (e.g. several CLI invocations in one process) must not stack handlers
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(LOG_FORMAT)

    if log_dir is not None:
        logs_dir = Path(log_dir)
        logs_dir.mkdir(parents=True, exist_ok=True)

        # File handler for all logs
        file_handler = logging.handlers.RotatingFileHandler(
            logs_dir / "zcli.log",
            maxBytes=10485760,  # 10MB
            backupCount=5
        )
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

        # Error file handler
        error_handler = logging.handlers.RotatingFileHandler(
            logs_dir / "error.log",
            maxBytes=10485760,  # 10MB
            backupCount=5
        )
        error_handler.setLevel(logging.ERROR)
        error_handler.setFormatter(formatter)
        logger.addHandler(error_handler)

    if console:
        # Console output goes to stderr so JSON results on stdout stay parseable
        console_handler = logging.StreamHandler()
        console_handler.setLevel(logging.WARNING)
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

    return logger

def get_logger(module: str) -> logging.Logger:
    """Child of the package logger, so handlers installed by setup_logging apply"""
    return logging.getLogger(f"zcli.{module.rsplit('.', 1)[-1]}")

logger = get_logger("monitor")

# Decorator for monitoring network operations
def monitor_operation(operation_name: Optional[str] = None):
    def decorator(func):
        @wraps(func)
        async def wrapper(*args, **kwargs):
            start_time = time.time()
            operation = operation_name or func.__name__
            logger.info(f"{operation} started")

            try:
                result = await func(*args, **kwargs)
                return result
            except Exception as e:
                logger.error(f"Error in {operation}: {str(e)}")
                raise
            finally:
                end_time = time.time()
                elapsed = (end_time - start_time) * 1000  # Convert to milliseconds
                logger.info(f"{operation} finished in {elapsed:.0f} ms")

        return wrapper
    return decorator
