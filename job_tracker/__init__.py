"""Job application tracker: domain model and SQLite-backed store.

Usage:
    from job_tracker import JobApplication, JobStore, Offer
    store = await JobStore.open("sqlite:data/jobs.db")
    await store.insert(JobApplication(company="TechCorp", status=Offer(95000)))
"""

from .errors import (
    DecodeError,
    JobTrackerError,
    NotFoundError,
    SchemaMismatchError,
    StoreConnectionError,
    StoreError,
    ValidationError,
)
from .forms import ApplicationForm, StatusChoice
from .models import (
    Applied,
    Interview,
    JobApplication,
    Offer,
    Rejected,
    SalaryRange,
    Status,
)
from .connection import MEMORY_TARGET
from .store import JobStore

__all__ = [
    "Applied",
    "ApplicationForm",
    "DecodeError",
    "Interview",
    "JobApplication",
    "JobStore",
    "JobTrackerError",
    "MEMORY_TARGET",
    "NotFoundError",
    "Offer",
    "Rejected",
    "SalaryRange",
    "SchemaMismatchError",
    "Status",
    "StatusChoice",
    "StoreConnectionError",
    "StoreError",
    "ValidationError",
]
