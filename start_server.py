#!/usr/bin/env python3
"""
Start the Floodwatch API server.
"""
import sys
from pathlib import Path

import uvicorn

# Add the project root to the Python path
sys.path.append(str(Path(__file__).parent))

from floodwatch.core.config import settings


def start_server():
    print("Starting Floodwatch API...")
    print(f"Ingest endpoint: http://localhost:8000{settings.api_prefix}/readings")
    if settings.debug:
        print(f"Swagger UI: http://localhost:8000{settings.api_prefix}/docs")
    print(f"Civil time zone: {settings.time_zone}")

    uvicorn.run(
        "floodwatch.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.debug,
        log_level=settings.log_level.lower(),
        access_log=True,
    )


if __name__ == "__main__":
    start_server()
