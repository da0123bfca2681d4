"""Main entry point for the InferDev application.

Runs the FastAPI application with uvicorn using the configured host and port.
"""

import uvicorn

from inferdev.core.config import get_settings

settings = get_settings()

if __name__ == "__main__":
    uvicorn.run(
        "inferdev.api.main:app",
        host=settings.APP_HOST,
        port=settings.APP_PORT,
        reload=settings.is_development(),
        log_config=None,  # Use our custom logging
        access_log=False,  # Handled by middleware
    )
