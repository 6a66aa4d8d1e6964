from fastapi import FastAPI

from resultlens import __version__
from resultlens.api.health_routes import router as health_router
from resultlens.api.navigation_routes import router as navigation_router
from resultlens.api.results_routes import router as results_router
from resultlens.core.logging import setup_logging

setup_logging()

tags_metadata = [
    {
        "name": "results",
        "description": "Browse scanner reports as one normalized tree: list result files, expand them, refresh.",
    },
    {
        "name": "navigation",
        "description": "Resolve scanner-reported paths (container mounts, workspace anchors) to project files.",
    },
    {
        "name": "health",
        "description": "Service liveness.",
    },
]

app = FastAPI(
    title="resultlens",
    description="Unified, navigable view over GitLeaks, Trivy, Semgrep and Checkov JSON reports.",
    version=__version__,
    openapi_tags=tags_metadata,
)

app.include_router(health_router)
app.include_router(results_router)
app.include_router(navigation_router)
