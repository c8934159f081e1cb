import logging
import contextvars
from contextlib import contextmanager

# Extra fields copied onto every record emitted inside a LoggingContext
log_context = contextvars.ContextVar("s3loader_log_context", default={})


class ContextFilter(logging.Filter):
    def filter(self, record):
        context = log_context.get()
        for key, value in context.items():
            setattr(record, key, value)
        return True


@contextmanager
def LoggingContext(logger: logging.Logger, **kwargs):
    """
    Context manager to add extra context to log records.
    example:
        with LoggingContext(logger, artifact="com.example.Foo", bucket="code"):
            logger.info("This log will carry artifact and bucket")
    """
    current = log_context.get().copy()
    current.update(kwargs)
    token = log_context.set(current)
    try:
        yield
    finally:
        log_context.reset(token)
