"""
Configuration module for the APK distribution service
Centralizes environment variables
"""
import os
from pathlib import Path

# Data layout
DATA_DIR = Path(os.getenv("APKDIST_DATA_DIR", "data"))
DB_FILE = Path(os.getenv("APKDIST_DB_FILE", str(DATA_DIR / "db.json")))
UPLOADS_DIR = Path(os.getenv("APKDIST_UPLOADS_DIR", str(DATA_DIR / "uploads")))

# Admin UI static files, mounted at / only when the directory exists
PUBLIC_DIR = Path(os.getenv("APKDIST_PUBLIC_DIR", "public"))

# Single shared admin credential
ADMIN_USERNAME = os.getenv("APKDIST_ADMIN_USERNAME", "admin")
ADMIN_PASSWORD = os.getenv("APKDIST_ADMIN_PASSWORD", "123456")

# Externally served prefix of uploaded files
UPLOADS_URL_PREFIX = "/uploads/"
