from pydantic import BaseModel
from typing import List


class Vote(BaseModel):
    id: int
    candidateId: int
    voterToken: str


class CandidateStats(BaseModel):
    id: int
    name: str
    votes: int
    percentage: str  # one fractional digit, e.g. "66.7"


class VoteStats(BaseModel):
    candidates: List[CandidateStats]
    totalVotes: int
