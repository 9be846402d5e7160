#!/usr/bin/env python3
# backend/run.py
"""
Development server runner.

Serves the REST API and the ``/ws`` socket from one process. The messaging
hub keeps presence in memory, so run a single worker.
"""
import os
import sys
from pathlib import Path

# Add backend to path
backend_dir = Path(__file__).parent
sys.path.insert(0, str(backend_dir))
os.chdir(backend_dir)

import uvicorn

if __name__ == "__main__":
    port = int(os.getenv("PORT", "8000"))
    print(f"Starting Agora at http://localhost:{port} (docs at /docs, socket at /ws)")

    uvicorn.run("agora.main:app", host="0.0.0.0", port=port, reload=True, log_level="info")
