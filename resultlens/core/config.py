import os

from pydantic import BaseModel

from resultlens import __version__


class Settings(BaseModel):
    # Project root the result files and finding paths are resolved against.
    # Unset means no workspace is open.
    WORKSPACE_ROOT: str | None = os.getenv("WORKSPACE_ROOT")

    # Well-known directory (relative to WORKSPACE_ROOT) the runner writes reports into
    RESULTS_DIR: str = os.getenv("RESULTS_DIR", ".niobium_results")

    # Mount point scanners see the project under when run in a container
    CONTAINER_PREFIX: str = os.getenv("CONTAINER_PREFIX", "/src/")

    # Display
    LABEL_MAX_LENGTH: int = int(os.getenv("LABEL_MAX_LENGTH", "100"))

    APP_VERSION: str = os.getenv("APP_VERSION", __version__)


settings = Settings()
