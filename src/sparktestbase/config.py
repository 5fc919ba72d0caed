import os
from pathlib import Path
from typing import Dict, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field

ENV_PREFIX = 'SPARKTESTBASE_'

_env_fields = ('master', 'shuffle_partitions', 'ui_enabled', 'working_dir')


class SessionConfig(BaseModel):
    """Settings used by `SparkSessionFactory` to build test sessions.

    Attributes:
        master (str): The Spark master URL.
        shuffle_partitions (int): Value of `spark.sql.shuffle.partitions`.
        ui_enabled (bool): Whether the Spark UI is started.
        working_dir (Path): Directory that relative test paths and the warehouse resolve against.
        options (Dict[str, str]): Extra Spark configuration applied to the session builder.
    """

    model_config = ConfigDict(frozen=True)

    master: str = 'local[*]'
    shuffle_partitions: int = Field(default=4, ge=1)
    ui_enabled: bool = False
    working_dir: Path = Field(default_factory=Path.cwd)
    options: Dict[str, str] = Field(default_factory=dict)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> 'SessionConfig':
        """Builds a config from `SPARKTESTBASE_*` environment variables.

        Variables that are not set fall back to the model defaults.

        Args:
            environ (Mapping[str, str], optional): The environment to read. Defaults to `os.environ`.

        Returns:
            SessionConfig: The validated config.
        """
        environ = os.environ if environ is None else environ
        values = {}
        for name in _env_fields:
            raw = environ.get(f'{ENV_PREFIX}{name.upper()}')
            if raw is not None:
                values[name] = raw
        return cls.model_validate(values)

    def warehouse_dir(self) -> Path:
        return self.working_dir / 'spark-warehouse'
