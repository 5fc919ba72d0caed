class SparkTestBaseImportError(ImportError):
    """Error importing PySpark. Raised when PySpark is not installed or the installed version is not supported."""


class ExpectedFailureError(AssertionError):
    """An operation expected to fail returned normally or raised the wrong type of error"""


class UnknownStageError(TypeError):
    """A pipeline stage is neither an Estimator nor a Transformer"""


class SessionStoppedError(RuntimeError):
    """The suite's Spark session was requested after it had been stopped"""


class SuiteLifecycleError(RuntimeError):
    """A suite was set up again after it had been torn down"""
