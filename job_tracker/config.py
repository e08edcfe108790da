"""Defaults for applications hosting the store.

The store itself takes an explicit target; only track_jobs.py reads these.
"""

from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

DATA_DIR: Path = Path("data")
DEFAULT_TARGET: str = os.environ.get(
    "JOB_TRACKER_DB", f"sqlite:{(DATA_DIR / 'jobs.db').as_posix()}"
)
