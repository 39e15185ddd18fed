from .admin_model import Admin, AdminOut
from .candidate_model import Candidate
from .vote_model import CandidateStats, Vote, VoteStats

__all__ = ["Admin", "AdminOut", "Candidate", "CandidateStats", "Vote", "VoteStats"]
