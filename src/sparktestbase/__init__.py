__version__ = '1.0.0'

from sparktestbase.base import SparkTestBase, SuiteContext, SuiteState
from sparktestbase.fixtures import make_basic_df, make_basic_nullable_df, verify_result
from sparktestbase.probes import Stage, StageKind, expect_failure, expect_failure_from_stage
from sparktestbase.session import LazySession, SparkSessionFactory
from sparktestbase.tags import EXTENDED, LINUX_ONLY, linux_only, tagged, with_tag

__all__ = [
    'SparkTestBase',
    'SuiteContext',
    'SuiteState',
    'SparkSessionFactory',
    'LazySession',
    'Stage',
    'StageKind',
    'expect_failure',
    'expect_failure_from_stage',
    'make_basic_df',
    'make_basic_nullable_df',
    'verify_result',
    'EXTENDED',
    'LINUX_ONLY',
    'linux_only',
    'with_tag',
    'tagged',
]
