from contextlib import contextmanager
from typing import TYPE_CHECKING, Any, Callable, Iterator, TypeVar

if TYPE_CHECKING:
    from pyspark import SparkContext

T = TypeVar('T')

SILENT_LEVEL = 'OFF'
RESTORE_LEVEL = 'WARN'
"""Level set after suppression ends. Spark has no `getLogLevel`, so the previous level is not restored."""


@contextmanager
def suppressed_logging(spark_context: 'SparkContext') -> Iterator[None]:
    """Silences Spark logging for the duration of the block.

    Args:
        spark_context (pyspark.SparkContext): The context whose log level is changed.
    """
    spark_context.setLogLevel(SILENT_LEVEL)
    try:
        yield
    finally:
        spark_context.setLogLevel(RESTORE_LEVEL)


def without_logging(
    spark_context: 'SparkContext', func: Callable[..., T], *args: Any, **kwargs: Any
) -> T:
    with suppressed_logging(spark_context):
        return func(*args, **kwargs)
