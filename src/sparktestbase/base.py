import logging
import time
import unittest
from contextlib import AbstractContextManager
from enum import Enum
from typing import TYPE_CHECKING, Any, Callable, Type, TypeVar

from sparktestbase import fixtures
from sparktestbase.exceptions import SuiteLifecycleError
from sparktestbase.logging_guard import without_logging
from sparktestbase.probes import Stage, expect_failure, expect_failure_from_stage
from sparktestbase.session import LazySession, SparkSessionFactory, default_factory
from sparktestbase.tags import Tags
from sparktestbase.timing import TimingRecorder, measure

if TYPE_CHECKING:
    from pyspark import SparkContext
    from pyspark.sql import DataFrame, SparkSession

logger = logging.getLogger(__name__)

T = TypeVar('T')
E = TypeVar('E', bound=BaseException)


class SuiteState(Enum):
    UNINITIALIZED = 'uninitialized'
    ACTIVE = 'active'
    STOPPED = 'stopped'


class SuiteContext:
    """State shared by every test of one suite: its lazy session and its timings.

    Attributes:
        name (str): The suite name.
        session (LazySession): The suite's session handle.
        timing (TimingRecorder): Per-test and per-suite timings.
        state (SuiteState): Where the suite is in its lifecycle.
    """

    def __init__(
        self,
        name: str,
        factory: SparkSessionFactory = default_factory,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.name = name
        self.session = LazySession(name, factory)
        self.timing = TimingRecorder(clock)
        self.state = SuiteState.UNINITIALIZED

    @property
    def session_initialized(self) -> bool:
        return self.session.initialized

    @property
    def suite_elapsed_ms(self) -> int:
        return self.timing.suite_elapsed_ms

    def before_all(self) -> None:
        if self.state is SuiteState.STOPPED:
            raise SuiteLifecycleError(f'Suite {self.name} has already been torn down')
        logger.info('>>>-------------------- %s --------------------<<<', self.name)
        self.timing.start_suite()
        if self.session_initialized:
            logger.info('Parallelism: %s', self.session.get().sparkContext.defaultParallelism)
        self.state = SuiteState.ACTIVE

    def before_each(self) -> None:
        self.timing.start_test()

    def after_each(self, test_name: str) -> AbstractContextManager:
        return self.timing.finalizing(f'Test {test_name}')

    def after_all(self) -> None:
        if self.state is SuiteState.STOPPED:
            return
        try:
            self.timing.end_suite(f'Suite {self.name}')
            self.session.stop()
        finally:
            self.state = SuiteState.STOPPED


class SparkTestBase(unittest.TestCase):
    """Base class for suites that need a Spark session.

    Every subclass gets its own `SuiteContext`. The session is only created if a test uses it, and is stopped
    once the suite is done. Test and suite durations are logged, as warnings when they run long.

    Class attributes:
        session_factory (SparkSessionFactory): Builds the suite's session.
        clock (Callable[[], float]): Time source, in seconds, for the timings.
        suite_tags (Tuple[str, ...]): Tags applied to every test of the suite, see `sparktestbase.tags`.
    """

    session_factory: SparkSessionFactory = default_factory
    clock: Callable[[], float] = time.monotonic
    suite_tags: Tags = ()
    suite: SuiteContext

    def __init_subclass__(cls, **kwargs: Any):
        super().__init_subclass__(**kwargs)
        cls.suite = SuiteContext(cls.__name__, cls.session_factory, cls.clock)

    @classmethod
    def setUpClass(cls) -> None:
        super().setUpClass()
        cls.suite.before_all()

    @classmethod
    def tearDownClass(cls) -> None:
        try:
            cls.suite.after_all()
        finally:
            super().tearDownClass()

    def setUp(self) -> None:
        self.suite.before_each()
        super().setUp()

    def tearDown(self) -> None:
        with self.suite.after_each(self._testMethodName):
            super().tearDown()

    @property
    def session(self) -> 'SparkSession':
        return self.suite.session.get()

    @property
    def sc(self) -> 'SparkContext':
        return self.session.sparkContext

    @property
    def working_dir(self) -> str:
        return self.session_factory.working_dir

    def normalize_path(self, path: str) -> str:
        return self.session_factory.custom_normalize(path)

    def without_logging(self, func: Callable[..., T], *args: Any, **kwargs: Any) -> T:
        return without_logging(self.sc, func, *args, **kwargs)

    def assert_raises_quietly(
        self, kind: Type[E], func: Callable[..., Any], *args: Any, **kwargs: Any
    ) -> E:
        """Checks that `func` raises `kind`, with Spark logging silenced while it runs."""
        return expect_failure(self.sc, kind, func, *args, **kwargs)

    def assert_stage_raises(self, kind: Type[E], stage: Any, data: 'DataFrame') -> E:
        """Checks that applying a pipeline stage to `data` raises `kind` once every output row is computed.

        Args:
            kind (Type[BaseException]): The expected exception type.
            stage (Stage or pyspark.ml.PipelineStage): The stage to fit (if needed) and apply.
            data (pyspark.sql.DataFrame): The input data.

        Returns:
            The raised exception.
        """
        return expect_failure_from_stage(self.sc, kind, Stage.of(stage), data)

    def make_basic_df(self) -> 'DataFrame':
        return fixtures.make_basic_df(self.session)

    def make_basic_nullable_df(self) -> 'DataFrame':
        return fixtures.make_basic_nullable_df(self.session)

    def verify_result(self, expected: 'DataFrame', result: 'DataFrame') -> bool:
        return fixtures.verify_result(expected, result)

    def measure(self, func: Callable[..., T], *args: Any, **kwargs: Any) -> T:
        return measure(func, *args, **kwargs)
