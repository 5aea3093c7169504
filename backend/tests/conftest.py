"""Root conftest: shared test configuration."""

import os

# Tests never talk to a real SMTP server
os.environ.setdefault("SMTP_HOST", "")
os.environ.setdefault("LOG_FORMAT", "json")
