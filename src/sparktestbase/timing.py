import logging
import time
from contextlib import contextmanager
from typing import Any, Callable, Iterator, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar('T')

TEST_THRESHOLD_MS = 3000
"""Tests running longer than this are logged as warnings"""
SUITE_THRESHOLD_MS = 10000
"""Suites running longer than this are logged as warnings"""


def log_time(name: str, elapsed_ms: int, threshold_ms: int) -> None:
    """Logs `<name> took <seconds>s`, as a warning when `elapsed_ms` is strictly above `threshold_ms`.

    Args:
        name (str): What was timed.
        elapsed_ms (int): The elapsed time in milliseconds.
        threshold_ms (int): The alert threshold in milliseconds.
    """
    msg = f'{name} took {elapsed_ms / 1000.0}s'
    if elapsed_ms > threshold_ms:
        logger.warning(msg)
    else:
        logger.info(msg)


class TimingRecorder:
    """Tracks the elapsed wall-clock time of each test and of the whole suite.

    Attributes:
        suite_elapsed_ms (int): Sum of the elapsed times of every finished test.
        test_start_ms (int): Start timestamp of the current test.
        test_elapsed_ms (int): Elapsed time of the last finished test.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self.clock = clock
        self.suite_elapsed_ms = 0
        self.test_start_ms = 0
        self.test_elapsed_ms = 0

    def now_ms(self) -> int:
        return round(self.clock() * 1000)

    def start_suite(self) -> None:
        self.suite_elapsed_ms = 0

    def start_test(self) -> None:
        self.test_start_ms = self.now_ms()
        self.test_elapsed_ms = 0

    def end_test(self, name: str) -> int:
        self.test_elapsed_ms = self.now_ms() - self.test_start_ms
        log_time(name, self.test_elapsed_ms, TEST_THRESHOLD_MS)
        self.suite_elapsed_ms += self.test_elapsed_ms
        return self.test_elapsed_ms

    @contextmanager
    def finalizing(self, name: str) -> Iterator[None]:
        """Ends the current test once the block exits, whether it raised or not."""
        try:
            yield
        finally:
            self.end_test(name)

    def end_suite(self, name: str) -> int:
        log_time(name, self.suite_elapsed_ms, SUITE_THRESHOLD_MS)
        return self.suite_elapsed_ms


def measure(func: Callable[..., T], *args: Any, **kwargs: Any) -> T:
    """Calls `func` and logs how long it took.

    Returns:
        The result of `func`.
    """
    start = time.perf_counter()
    result = func(*args, **kwargs)
    logger.info('Elapsed time: %s sec', time.perf_counter() - start)
    return result
