"""
Enum definitions for run policies and outcomes.
"""
from enum import Enum


class BatchFailurePolicy(str, Enum):
    """What the batch deleter does when one remove call fails."""
    CONTINUE = "CONTINUE"  # log and move on to the next batch
    ABORT = "ABORT"  # stop and propagate the error


class PruneOutcome(str, Enum):
    """Terminal states of the listing pruner."""
    EMPTY = "EMPTY"  # listing returned no entries
    DONE = "DONE"  # page had no qualifying entries
    ABORTED = "ABORTED"  # list/remove error, no progress or page limit
