"""
Test configuration. The environment must be set before carmarket is imported,
since settings and the database engine are built at import time.
"""
import os
import tempfile

_db_dir = tempfile.mkdtemp(prefix="carmarket-tests-")

os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{os.path.join(_db_dir, 'test.db')}"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["ENVIRONMENT"] = "development"
os.environ["ADMIN_EMAIL"] = "admin@carmarket.io"
os.environ["ADMIN_PASSWORD"] = "admin123"
os.environ["GEMINI_API_KEY"] = ""
os.environ["LOG_LEVEL"] = "WARNING"
