#!/usr/bin/env python3
"""
Astro Dashboard - Main Entry Point
Serves the dashboard statistics API.
"""
import sys

import uvicorn

from astro_dashboard.app import app
from astro_dashboard.config import settings

if __name__ == "__main__":
    print("Starting Astro Dashboard...")
    print(f"Stats endpoint: http://localhost:{settings.APP_PORT}/stats")
    print(f"API Docs: http://localhost:{settings.APP_PORT}/docs")
    print("Press Ctrl+C to stop.")

    try:
        uvicorn.run(
            app,
            host="0.0.0.0",
            port=settings.APP_PORT,
            reload=False
        )
    except Exception as e:
        print(f"Failed to start: {e}")
        sys.exit(1)
