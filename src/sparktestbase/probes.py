from enum import Enum
from typing import TYPE_CHECKING, Any, Callable, Type, TypeVar

from sparktestbase import utils
from sparktestbase.exceptions import ExpectedFailureError, UnknownStageError
from sparktestbase.logging_guard import suppressed_logging

if TYPE_CHECKING:
    from pyspark import SparkContext
    from pyspark.ml import Transformer
    from pyspark.sql import DataFrame

E = TypeVar('E', bound=BaseException)


def expect_failure(
    spark_context: 'SparkContext',
    kind: Type[E],
    func: Callable[..., Any],
    *args: Any,
    **kwargs: Any,
) -> E:
    """Runs `func` with Spark logging silenced and checks that it raises `kind`.

    Args:
        spark_context (pyspark.SparkContext): The context whose logging is silenced.
        kind (Type[BaseException]): The exception type `func` must raise.
        func (Callable): The operation expected to fail.
        *args: Positional arguments for `func`.
        **kwargs: Keyword arguments for `func`.

    Returns:
        The exception raised by `func`.

    Raises:
        ExpectedFailureError: If `func` returned normally or raised another type of exception.
    """
    with suppressed_logging(spark_context):
        try:
            func(*args, **kwargs)
        except kind as raised_error:
            return raised_error
        except Exception as raised_error:
            raise ExpectedFailureError(
                f'Expected {kind.__name__} to be raised, but {type(raised_error).__name__} was raised'
            ) from raised_error
    raise ExpectedFailureError(f'Expected {kind.__name__} to be raised, but nothing was raised')


class StageKind(Enum):
    ESTIMATOR = 'estimator'
    TRANSFORMER = 'transformer'
    UNKNOWN = 'unknown'


class Stage:
    """A pipeline stage tagged with whether it has to be fit before it can transform data.

    Build one with `Stage.estimator`, `Stage.transformer` or `Stage.unknown`, or let `Stage.of` classify a
    `pyspark.ml` stage.
    """

    def __init__(self, kind: StageKind, value: Any):
        self.kind = kind
        self.value = value

    def __repr__(self) -> str:
        return f'Stage({self.kind.value}, {self.value!r})'

    @classmethod
    def estimator(cls, value: Any) -> 'Stage':
        return cls(StageKind.ESTIMATOR, value)

    @classmethod
    def transformer(cls, value: Any) -> 'Stage':
        return cls(StageKind.TRANSFORMER, value)

    @classmethod
    def unknown(cls, value: Any) -> 'Stage':
        return cls(StageKind.UNKNOWN, value)

    @classmethod
    def of(cls, value: Any) -> 'Stage':
        """Classifies a `pyspark.ml` pipeline stage."""
        if isinstance(value, Stage):
            return value
        utils.require_pyspark_ml()
        from pyspark.ml import Estimator, Transformer

        if isinstance(value, Estimator):
            return cls.estimator(value)
        if isinstance(value, Transformer):
            return cls.transformer(value)
        return cls.unknown(value)


def resolve_stage(stage: Stage, data: 'DataFrame') -> 'Transformer':
    """Returns the transformer for a stage, fitting estimators on `data` first.

    Raises:
        UnknownStageError: If the stage is neither an estimator nor a transformer.
    """
    if stage.kind is StageKind.ESTIMATOR:
        return stage.value.fit(data)
    if stage.kind is StageKind.TRANSFORMER:
        return stage.value
    raise UnknownStageError(f'Unknown pipeline stage: {stage.value!r}')


def materialize(df: 'DataFrame') -> None:
    """Forces every row of `df` to be computed.

    A `count` may be answered without evaluating each row, which hides failures that only happen on some rows.
    """
    # a local lambda is pickled by value, so workers do not need this package installed
    df.foreach(lambda row: len(row))


def _run_stage(stage: Stage, data: 'DataFrame') -> None:
    transformer = resolve_stage(stage, data)
    materialize(transformer.transform(data))


def expect_failure_from_stage(
    spark_context: 'SparkContext', kind: Type[E], stage: Stage, data: 'DataFrame'
) -> E:
    """Checks that fitting (if needed) and applying `stage` to `data` raises `kind`.

    Unknown stages raise `UnknownStageError` straight away, even when it would match `kind`.
    """
    if stage.kind is StageKind.UNKNOWN:
        raise UnknownStageError(f'Unknown pipeline stage: {stage.value!r}')
    return expect_failure(spark_context, kind, _run_stage, stage, data)
