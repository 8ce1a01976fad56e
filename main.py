#!/usr/bin/env python3
import os

import uvicorn

from crudsql.app import create_app

# Create the FastAPI app
app = create_app()


if __name__ == "__main__":
    host = os.getenv("CRUDSQL_HOST", "0.0.0.0")
    port = int(os.getenv("CRUDSQL_PORT", "8000"))
    reload_enabled = os.getenv("CRUDSQL_DEV_MODE", "false").lower() == "true"

    print(f"Starting crudsql on {host}:{port}")
    uvicorn.run("main:app", host=host, port=port, reload=reload_enabled)
