from pydantic_settings import BaseSettings

SEM_ANALYSIS_ENV_PREFIX = "SEM_ANALYSIS_"


class RuntimeSettings(BaseSettings):
    """Process-level defaults for the command line interface.

    Values are read from ``SEM_ANALYSIS_*`` environment variables and only
    seed the CLI defaults; library functions take explicit configuration.
    """

    model_config = {"env_prefix": SEM_ANALYSIS_ENV_PREFIX}

    n_workers: int = 4
    log_level: str = "INFO"
    theta_min: float = -10.0
    theta_max: float = 10.0
