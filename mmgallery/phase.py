"""
PhaseResolver - Derives a period's workflow phase from lock marker files.
"""

import logging
import os

from .models import Phase

logger = logging.getLogger(__name__)

UPLOAD_LOCK = 'upload'
VOTE_LOCK = 'vote'


def check_lock(name: str, period_dir: str) -> bool:
    """Return True if '<name>.lock' exists in the period folder. Contents are ignored."""
    return os.path.exists(os.path.join(period_dir, f"{name}.lock"))


def phase_from_locks(upload_locked: bool, vote_locked: bool) -> Phase:
    """
    Map the two lock flags to a phase.
    
    A vote lock without an upload lock is anomalous and resolves to SUBMITTING.
    """
    if upload_locked and vote_locked:
        return Phase.CLOSED
    if upload_locked:
        return Phase.VOTING_OPEN
    return Phase.SUBMITTING


def resolve_phase(period_dir: str) -> Phase:
    """Return the phase of the period folder from its lock markers."""
    upload_locked = check_lock(UPLOAD_LOCK, period_dir)
    vote_locked = check_lock(VOTE_LOCK, period_dir)
    if vote_locked and not upload_locked:
        logger.warning(f"{period_dir} has a vote lock but no upload lock, treating as submitting")
    return phase_from_locks(upload_locked, vote_locked)


def can_vote(phase: Phase) -> bool:
    return phase is Phase.VOTING_OPEN
