"""Root conftest: settings are read at import time, so .env.test goes into os.environ first."""
from __future__ import annotations

import os
from pathlib import Path

_ENV_TEST = Path(__file__).resolve().parent / ".env.test"

for raw in _ENV_TEST.read_text().splitlines() if _ENV_TEST.exists() else ():
    line = raw.strip()
    if line and not line.startswith("#"):
        key, _, value = line.partition("=")
        os.environ.setdefault(key.strip(), value.strip())
