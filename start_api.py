#!/usr/bin/env python3
"""
Simple script to start the FastAPI server.
"""
import os
import uvicorn

from worker_assignment.utils.config import config

project_root = os.path.dirname(os.path.abspath(__file__))

if __name__ == "__main__":
    uvicorn.run(
        "api.main:app",
        host=config.API_HOST,
        port=config.API_PORT,
        reload=config.DEBUG,
        reload_dirs=[project_root],
    )
