from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterator

from ..core.exceptions import InvariantViolation, TransactionFailure
from ..stats.repository import BatchStore, BatchUnit

logger = logging.getLogger(__name__)


@contextmanager
def batch_transaction(store: BatchStore, job_name: str) -> Iterator[BatchUnit]:
    """One transaction per job run; any failure rolls everything back.

    InvariantViolation propagates as-is, every other error is reported once
    as TransactionFailure so the scheduler can retry the run.
    """

    try:
        with store.transaction() as unit:
            yield unit
    except (InvariantViolation, TransactionFailure):
        logger.error("%s aborted and rolled back", job_name, exc_info=True)
        raise
    except Exception as exc:
        logger.error("%s aborted and rolled back", job_name, exc_info=True)
        raise TransactionFailure(f"{job_name} failed: {exc}") from exc
