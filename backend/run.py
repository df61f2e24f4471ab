#!/usr/bin/env python3
# backend/run.py
"""
Development server runner.

Uses an on-disk SQLite database and the in-memory OTP store unless the
environment already points somewhere else. Not for production.
"""
import os
import sys
from pathlib import Path

backend_dir = Path(__file__).parent
sys.path.insert(0, str(backend_dir))
os.chdir(backend_dir)

os.environ.setdefault("DATABASE_URL", "sqlite:///./beautyplaza_dev.db")
os.environ.setdefault("OTP_STORE_BACKEND", "memory")
os.environ.setdefault("LOG_LEVEL", "DEBUG")

import uvicorn

if __name__ == "__main__":
    print("🚀 Starting Beauty Plaza development server")
    print(f"🗄️  Database: {os.environ['DATABASE_URL']}")
    print("🌐 Access at: http://localhost:8000")
    print("📚 API Docs: http://localhost:8000/docs")

    uvicorn.run("beautyplaza.main:app", host="0.0.0.0", port=8000, reload=True, log_level="info")
