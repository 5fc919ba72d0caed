from typing import TYPE_CHECKING, Optional

from sparkdantic import SparkModel

if TYPE_CHECKING:
    from pyspark.sql import DataFrame, SparkSession


class BasicRow(SparkModel):
    numbers: int
    words: str
    more: str


class NullableRow(SparkModel):
    indices: int
    numbers: float
    words: str
    more: Optional[str] = None


_basic_rows = [
    (0, 'guitars', 'drums'),
    (1, 'piano', 'trumpet'),
    (2, 'bass', 'cymbals'),
]

_nullable_rows = [
    (0, 2.5, 'guitars', 'drums'),
    (1, float('nan'), 'piano', 'trumpet'),
    (2, 8.9, 'bass', None),
]


def make_basic_df(spark: 'SparkSession') -> 'DataFrame':
    """Three rows of `numbers`, `words` and `more`."""
    return spark.createDataFrame(_basic_rows, schema=BasicRow.model_spark_schema())


def make_basic_nullable_df(spark: 'SparkSession') -> 'DataFrame':
    """Three rows of `indices`, `numbers`, `words` and `more`, with a NaN in `numbers` and a null in `more`."""
    return spark.createDataFrame(_nullable_rows, schema=NullableRow.model_spark_schema())


def verify_result(expected: 'DataFrame', result: 'DataFrame') -> bool:
    """Compares the shape of two DataFrames.

    Args:
        expected (pyspark.sql.DataFrame): The expected result.
        result (pyspark.sql.DataFrame): The actual result.

    Returns:
        bool: Whether the column names match, in order.

    Raises:
        AssertionError: If the row counts or the column counts differ.
    """
    expected_count, result_count = expected.count(), result.count()
    if expected_count != result_count:
        raise AssertionError(f'Expected {expected_count} rows, but found {result_count}')
    expected_width, result_width = len(expected.schema), len(result.schema)
    if expected_width != result_width:
        raise AssertionError(f'Expected {expected_width} columns, but found {result_width}')
    return all(x == y for x, y in zip(expected.columns, result.columns))
