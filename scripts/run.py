#!/usr/bin/env python3
"""Run the viewtrail API with Uvicorn."""

import os

import uvicorn

PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))

if __name__ == "__main__":
    APP_HOST = os.getenv("APP_HOST", "127.0.0.1")
    APP_PORT = int(os.getenv("APP_PORT", "3000"))
    APP_RELOAD = os.getenv("APP_RELOAD", "False").lower() in ("true", "1", "t")
    APP_LOG_LEVEL = os.getenv("APP_LOG_LEVEL", "info")

    uvicorn.run(
        "viewtrail.main:app",
        host=APP_HOST,
        port=APP_PORT,
        reload=APP_RELOAD,
        log_level=APP_LOG_LEVEL,
        app_dir=PROJECT_ROOT,
        # one worker: the JSON store serializes writes inside a single process
        workers=1,
    )
