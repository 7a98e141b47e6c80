import logging
import sys

from loguru import logger

_INTERCEPTED_LOGGERS = ('uvicorn', 'uvicorn.access', 'uvicorn.error', 'sqlalchemy.engine')


class _InterceptHandler(logging.Handler):
    def emit(self, record: logging.LogRecord) -> None:
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno
        frame, depth = logging.currentframe(), 2
        while frame and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1
        logger.opt(depth=depth, exception=record.exc_info).log(level, record.getMessage())


def configure_logging(level: str, serialize: bool = False) -> None:
    logger.remove()
    logger.add(
        sys.stdout,
        level=level,
        enqueue=True,
        backtrace=True,
        diagnose=False,
        serialize=serialize,
    )
    handler = _InterceptHandler()
    logging.root.handlers = [handler]
    logging.root.setLevel(level)
    for name in _INTERCEPTED_LOGGERS:
        std_logger = logging.getLogger(name)
        std_logger.handlers = []
        std_logger.propagate = True
