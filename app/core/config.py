"""
App Configuration.

This module defines the global application settings using Pydantic Settings.
It loads configuration variables from environment variables and/or a .env file,
ensuring typed and validated settings for the application.

Attributes:
    settings: The global instance of the Settings class, ready to be imported and used.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional
import os


DEFAULT_REFERENCE_DATA_PATH = os.path.join(
    os.path.dirname(os.path.dirname(__file__)),
    "services",
    "change_risk",
    "reference",
    "reference_data.yaml",
)


class Settings(BaseSettings):
    """
    Application Settings.

    This class defines the configuration for the application, validating
    environment variables against the specified types.

    Attributes:
        PROJECT_NAME: The name of the project (default: "Change Risk Engine").
        LOG_LEVEL: Root log level passed to setup_logging.
        REFERENCE_DATA_PATH: YAML file holding historical changes, the change
            calendar and maintenance windows.
        PEAK_HOURS_START: First local hour (inclusive) considered peak.
        PEAK_HOURS_END: Last local hour (inclusive) considered peak.
        TEST_PASS_PROBABILITY: Odds that simulated tests pass.
        TEST_EVIDENCE_PROBABILITY: Odds that a simulated test completion link exists.
        SIMULATION_SEED: Optional seed for the simulated evidence source.
    """

    # Core
    PROJECT_NAME: str = "Change Risk Engine"
    LOG_LEVEL: str = "INFO"

    # Reference data
    REFERENCE_DATA_PATH: str = DEFAULT_REFERENCE_DATA_PATH

    # Intake policy
    PEAK_HOURS_START: int = 6
    PEAK_HOURS_END: int = 23

    # Testing simulation
    TEST_PASS_PROBABILITY: float = 0.7
    TEST_EVIDENCE_PROBABILITY: float = 0.5
    SIMULATION_SEED: Optional[int] = None

    model_config = SettingsConfigDict(
        env_file=".env", env_ignore_empty=True, extra="ignore"
    )


settings = Settings()
