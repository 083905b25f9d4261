"""gcdsudoku solver configuration."""

from dotenv import find_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Determine the environment file path, or None if not found
ENV_FILE = find_dotenv() or None


class SolverConfig(BaseSettings):
    """Configuration settings for the gcdsudoku solver."""

    max_workers: int | None = None
    """Maximum number of worker processes used for candidate generation.

    If None (default), uses os.cpu_count() minus one.
    """

    parallel_generation: bool = True
    """Whether to generate row candidates in worker processes. Default: True."""

    progress_interval: float = Field(30.0, gt=0)
    """Seconds between progress reports while the grid solver runs. Default: 30."""

    divisor_prefilter_rows: int = 2
    """Number of smallest rows whose divisors gate the divisor search.

    Divisors that divide no candidate of these rows are never tried.  Set to 0 to walk
    the whole divisor range. Default: 2.
    """

    log_dir: str = "logs"
    """Directory under which per-run log files are written. Default: "logs"."""

    model_config = SettingsConfigDict(
        env_prefix="GCDSUDOKU_",
        env_file=ENV_FILE,
        env_file_encoding="utf-8",
        extra="forbid",
    )


config = SolverConfig()
