import logging
from pathlib import Path
from typing import TYPE_CHECKING, Optional
from urllib.parse import urlparse

from sparktestbase import utils
from sparktestbase.config import SessionConfig
from sparktestbase.exceptions import SessionStoppedError

if utils.have_pyspark:
    utils.require_pyspark_version_in_range()
    from pyspark.sql import SparkSession

if TYPE_CHECKING:
    from pyspark.sql import SparkSession

logger = logging.getLogger(__name__)

DEFAULT_LOG_LEVEL = 'WARN'


class SparkSessionFactory:
    """Builds named Spark sessions for test suites.

    The config is read from the environment on first use unless one is given.
    """

    def __init__(self, config: Optional[SessionConfig] = None):
        self._config = config

    @property
    def config(self) -> SessionConfig:
        if self._config is None:
            self._config = SessionConfig.from_env()
        return self._config

    @property
    def working_dir(self) -> str:
        return str(self.config.working_dir.absolute())

    def custom_normalize(self, path: str) -> str:
        """Turns a test path into a URI Spark can read from.

        Paths that already carry a scheme (`file:`, `s3a:`, ...) are returned unchanged. Other paths are
        resolved against the working directory.

        Args:
            path (str): The path to normalize.

        Returns:
            str: The normalized URI.
        """
        # single letter schemes are Windows drive letters
        if len(urlparse(path).scheme) > 1:
            return path
        resolved = Path(path)
        if not resolved.is_absolute():
            resolved = Path(self.working_dir) / resolved
        return resolved.absolute().as_uri()

    def get_session(self, name: str, log_level: str = DEFAULT_LOG_LEVEL) -> 'SparkSession':
        """Creates (or reuses) a Spark session named after the suite.

        Args:
            name (str): The application name of the session.
            log_level (str): The Spark log level set once the session is up.

        Returns:
            pyspark.sql.SparkSession: The session.
        """
        utils.require_pyspark()
        config = self.config
        builder = (
            SparkSession.builder.master(config.master)
            .appName(name)
            .config('spark.sql.shuffle.partitions', str(config.shuffle_partitions))
            .config('spark.ui.enabled', str(config.ui_enabled).lower())
            .config('spark.ui.showConsoleProgress', 'false')
            .config('spark.sql.warehouse.dir', str(config.warehouse_dir().absolute()))
        )
        for key, value in config.options.items():
            builder = builder.config(key, value)

        session = builder.getOrCreate()
        session.sparkContext.setLogLevel(log_level)
        logger.debug('Spark session %s started on %s', name, config.master)
        return session


default_factory = SparkSessionFactory()


class LazySession:
    """A suite-owned Spark session, created at most once and only when first requested.

    Args:
        name (str): The suite name, used as the session name.
        factory (SparkSessionFactory): Where the session comes from.
    """

    def __init__(self, name: str, factory: SparkSessionFactory = default_factory):
        self.name = name
        self.factory = factory
        self._initialized = False
        self._stopped = False
        self._session: Optional['SparkSession'] = None

    @property
    def initialized(self) -> bool:
        """Whether the session has ever been requested."""
        return self._initialized

    @property
    def stopped(self) -> bool:
        return self._stopped

    def get(self) -> 'SparkSession':
        if self._stopped:
            raise SessionStoppedError(f'The spark session for suite {self.name} has been stopped')
        if self._session is None:
            logger.info('Creating a spark session for suite %s', self.name)
            self._initialized = True
            self._session = self.factory.get_session(self.name, log_level=DEFAULT_LOG_LEVEL)
        return self._session

    def stop(self) -> bool:
        """Stops the session if one was created.

        Returns:
            bool: True if a session was stopped, False if there was nothing to stop.
        """
        if self._stopped or not self._initialized or self._session is None:
            return False
        logger.info('Shutting down spark session')
        self._stopped = True
        self._session.stop()
        return True
