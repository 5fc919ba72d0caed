import pytest
from pyspark.sql import SparkSession

from sparktestbase.config import SessionConfig
from sparktestbase.session import SparkSessionFactory


class FakeClock:
    def __init__(self, start: float = 100.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance_ms(self, ms: int) -> None:
        self.now += ms / 1000.0


class FakeSparkContext:
    def __init__(self, default_parallelism: int = 4):
        self.defaultParallelism = default_parallelism
        self.levels = []

    def setLogLevel(self, level: str) -> None:
        self.levels.append(level)


class FakeSession:
    def __init__(self, name: str):
        self.name = name
        self.sparkContext = FakeSparkContext()
        self.stop_calls = 0

    def stop(self) -> None:
        self.stop_calls += 1


class FakeFactory(SparkSessionFactory):
    def __init__(self, tmp_dir=None):
        super().__init__(SessionConfig(working_dir=tmp_dir) if tmp_dir else SessionConfig())
        self.calls = []
        self.sessions = []

    def get_session(self, name, log_level='WARN'):
        self.calls.append((name, log_level))
        session = FakeSession(name)
        self.sessions.append(session)
        return session


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def fake_factory(tmp_path) -> FakeFactory:
    return FakeFactory(tmp_path)


@pytest.fixture(scope='session')
def spark() -> SparkSession:
    factory = SparkSessionFactory(SessionConfig(master='local[2]', shuffle_partitions=2))
    session = factory.get_session('sparktestbase-tests')
    yield session
    session.stop()


@pytest.fixture
def fake_context() -> FakeSparkContext:
    return FakeSparkContext()
