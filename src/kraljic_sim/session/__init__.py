"""Participant sessions: persisted rows, commands and storage"""

from kraljic_sim.session.models import EventSubmission, Session, SessionRecord, Submission

__all__ = ["EventSubmission", "Session", "SessionRecord", "Submission"]
