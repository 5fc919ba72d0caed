import pytest

from sparktestbase import probes
from sparktestbase.exceptions import ExpectedFailureError, UnknownStageError
from sparktestbase.probes import (
    Stage,
    StageKind,
    expect_failure,
    expect_failure_from_stage,
    materialize,
    resolve_stage,
)


class FakeFrame:
    """Rows are callables; a row is only computed when visited by `foreach`."""

    def __init__(self, rows):
        self.rows = rows

    def count(self):
        return len(self.rows)

    def foreach(self, f):
        for row in self.rows:
            f(row())


class FakeTransformer:
    def __init__(self, fail_on=None):
        self.fail_on = fail_on
        self.transformed = []

    def transform(self, data):
        self.transformed.append(data)

        def compute(value):
            def row():
                if value == self.fail_on:
                    raise ValueError(f'cannot transform {value}')
                return (value, value * 10)

            return row

        return FakeFrame([compute(value) for value in data])


class FakeEstimator:
    def __init__(self, fail_on=None):
        self.fail_on = fail_on
        self.fitted = []

    def fit(self, data):
        self.fitted.append(data)
        return FakeTransformer(self.fail_on)


def test_expect_failure_returns_raised_error(fake_context):
    def fail():
        raise ValueError('bad value')

    raised = expect_failure(fake_context, ValueError, fail)
    assert str(raised) == 'bad value'
    assert fake_context.levels == ['OFF', 'WARN']


def test_expect_failure_accepts_subclasses(fake_context):
    raised = expect_failure(fake_context, LookupError, {}.__getitem__, 'missing')
    assert isinstance(raised, KeyError)


def test_expect_failure_fails_when_nothing_raised(fake_context):
    with pytest.raises(ExpectedFailureError) as exc_info:
        expect_failure(fake_context, ValueError, lambda: None)

    assert str(exc_info.value) == 'Expected ValueError to be raised, but nothing was raised'
    assert isinstance(exc_info.value, AssertionError)
    assert fake_context.levels == ['OFF', 'WARN']


def test_expect_failure_reports_other_error(fake_context):
    def fail():
        raise KeyError('other')

    with pytest.raises(ExpectedFailureError) as exc_info:
        expect_failure(fake_context, ValueError, fail)

    assert str(exc_info.value) == 'Expected ValueError to be raised, but KeyError was raised'
    assert isinstance(exc_info.value.__cause__, KeyError)
    assert fake_context.levels == ['OFF', 'WARN']


def test_resolve_stage_fits_estimators():
    estimator = FakeEstimator()
    transformer = resolve_stage(Stage.estimator(estimator), [1, 2])
    assert isinstance(transformer, FakeTransformer)
    assert estimator.fitted == [[1, 2]]


def test_resolve_stage_uses_transformers_as_is():
    transformer = FakeTransformer()
    assert resolve_stage(Stage.transformer(transformer), [1]) is transformer


def test_resolve_stage_rejects_unknown_stage():
    with pytest.raises(UnknownStageError) as exc_info:
        resolve_stage(Stage.unknown('not a stage'), [1])
    assert "Unknown pipeline stage: 'not a stage'" == str(exc_info.value)


def test_materialize_visits_every_row():
    frame = FakeTransformer(fail_on=3).transform([1, 2, 3])
    assert frame.count() == 3
    with pytest.raises(ValueError, match='cannot transform 3'):
        materialize(frame)


def test_stage_failure_surfaces_on_last_row(fake_context):
    estimator = FakeEstimator(fail_on=3)
    raised = expect_failure_from_stage(fake_context, ValueError, Stage.estimator(estimator), [1, 2, 3])

    assert str(raised) == 'cannot transform 3'
    assert estimator.fitted == [[1, 2, 3]]
    assert fake_context.levels == ['OFF', 'WARN']


def test_stage_without_failure_fails_probe(fake_context):
    with pytest.raises(ExpectedFailureError):
        expect_failure_from_stage(fake_context, ValueError, Stage.transformer(FakeTransformer()), [1, 2])


@pytest.mark.parametrize('kind', [UnknownStageError, TypeError, Exception])
def test_unknown_stage_is_never_the_expected_failure(fake_context, kind):
    with pytest.raises(UnknownStageError):
        expect_failure_from_stage(fake_context, kind, Stage.unknown(object()), [1])
    assert fake_context.levels == []


def test_stage_of_classifies_pyspark_stages(spark):
    from pyspark.ml.feature import SQLTransformer, StringIndexer

    assert Stage.of(StringIndexer(inputCol='words', outputCol='idx')).kind is StageKind.ESTIMATOR
    assert Stage.of(SQLTransformer(statement='SELECT * FROM __THIS__')).kind is StageKind.TRANSFORMER
    assert Stage.of(object()).kind is StageKind.UNKNOWN

    stage = Stage.transformer(object())
    assert Stage.of(stage) is stage


def test_stage_failure_with_spark(spark):
    from pyspark.ml.feature import SQLTransformer
    from pyspark.sql.utils import AnalysisException

    data = spark.createDataFrame([(0, 'a'), (1, 'b')], 'id INT, word STRING')
    stage = Stage.of(SQLTransformer(statement='SELECT missing_column FROM __THIS__'))

    expect_failure_from_stage(spark.sparkContext, AnalysisException, stage, data)


def test_materialize_ships_a_local_function():
    seen = []

    class RecordingFrame:
        def foreach(self, f):
            seen.append(f)
            f((1, 2))

    materialize(RecordingFrame())

    (f,) = seen
    assert '<locals>' in f.__qualname__
    assert getattr(probes, f.__name__, None) is not f
