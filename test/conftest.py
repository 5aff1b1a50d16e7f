"""
Test Configuration

Environment setup MUST happen before any application import: settings and
the loguru sinks read it at import time.

Architecture:
- Unit tests (test/**/unit/): in-memory unit of work, no database
- Integration tests (test/**/integration/): SQLite through aiosqlite, tables
  created from the ORM metadata for every test
"""

import os
from pathlib import Path


def _early_setup_test_environment() -> None:
    test_dir = Path(__file__).parent

    test_log_dir = test_dir / 'test_log'
    test_log_dir.mkdir(exist_ok=True)
    os.environ['TEST_LOG_DIR'] = str(test_log_dir)

    os.environ.setdefault('DEBUG', 'false')
    os.environ.setdefault('QR_SECRET', 'test-qr-secret')
    os.environ.setdefault('SECRET_KEY', 'test-jwt-secret')
    os.environ.setdefault('DATABASE_URL', 'sqlite+aiosqlite:///:memory:')
    os.environ.setdefault('UPLOAD_DIR', str(test_dir / 'test_uploads'))


_early_setup_test_environment()
