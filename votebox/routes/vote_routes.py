import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Request

from votebox.crud import turnout_percentage
from votebox.models import Vote
from votebox.routes import get_storage
from votebox.schemas import VoteCheckResponse, VoteCreate, VoteStatsResponse
from votebox.storage import AlreadyVotedError, CandidateNotFoundError, Storage

logger = logging.getLogger(__name__)

vote_router = APIRouter(prefix="/api/votes", tags=["Vote"])


@vote_router.post("", response_model=Vote, status_code=201)
def cast_vote(vote: VoteCreate, storage: Storage = Depends(get_storage)):
    """
    Casts a vote and increments the candidate's tally.
    """
    try:
        # Prevent double voting
        if storage.has_voted(vote.voterToken):
            raise HTTPException(status_code=400, detail="You have already voted")

        # Verify candidate
        if storage.get_candidate(vote.candidateId) is None:
            raise HTTPException(status_code=404, detail="Candidate not found")

        # Storage repeats both checks atomically; these catch a race lost since
        return storage.cast_vote(vote.candidateId, vote.voterToken)
    except AlreadyVotedError:
        raise HTTPException(status_code=400, detail="You have already voted")
    except CandidateNotFoundError:
        raise HTTPException(status_code=404, detail="Candidate not found")
    except HTTPException:
        raise
    except Exception:
        logger.exception("Error casting vote")
        raise HTTPException(status_code=500, detail="Failed to cast vote")


@vote_router.get("", response_model=List[Vote])
def list_votes(storage: Storage = Depends(get_storage)):
    try:
        return storage.list_votes()
    except Exception:
        logger.exception("Error fetching votes")
        raise HTTPException(status_code=500, detail="Failed to fetch votes")


@vote_router.get("/check/{token}", response_model=VoteCheckResponse)
def check_vote(token: str, storage: Storage = Depends(get_storage)):
    try:
        return {"hasVoted": storage.has_voted(token)}
    except Exception:
        logger.exception("Error checking vote status")
        raise HTTPException(status_code=500, detail="Failed to check vote status")


@vote_router.get("/stats", response_model=VoteStatsResponse)
def get_stats(request: Request, storage: Storage = Depends(get_storage)):
    try:
        stats = storage.vote_stats()
        return VoteStatsResponse(
            candidates=stats.candidates,
            totalVotes=stats.totalVotes,
            turnoutPercentage=turnout_percentage(stats.totalVotes, request.app.state.eligible_voters),
        )
    except Exception:
        logger.exception("Error computing vote statistics")
        raise HTTPException(status_code=500, detail="Failed to fetch vote statistics")
