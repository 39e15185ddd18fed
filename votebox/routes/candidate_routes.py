import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Path

from votebox.models import Candidate
from votebox.routes import get_storage
from votebox.schemas import CandidateCreate, CandidateUpdate, MessageResponse
from votebox.storage import Storage

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/candidates", tags=["Candidates"])


@router.get("", response_model=List[Candidate])
def list_candidates(storage: Storage = Depends(get_storage)):
    try:
        return storage.list_candidates()
    except Exception:
        logger.exception("Error fetching candidates")
        raise HTTPException(status_code=500, detail="Failed to fetch candidates")


@router.post("", response_model=Candidate, status_code=201)
def create_candidate(candidate: CandidateCreate, storage: Storage = Depends(get_storage)):
    try:
        return storage.create_candidate(candidate.name, candidate.experience, candidate.symbolImage)
    except Exception:
        logger.exception("Error creating candidate")
        raise HTTPException(status_code=500, detail="Failed to create candidate")


@router.patch("/{candidate_id}", response_model=Candidate)
def update_candidate(
    candidate_update: CandidateUpdate,
    candidate_id: int = Path(...),
    storage: Storage = Depends(get_storage),
):
    try:
        updated = storage.update_candidate(candidate_id, candidate_update.model_dump(exclude_unset=True))
    except Exception:
        logger.exception(f"Error updating candidate {candidate_id}")
        raise HTTPException(status_code=500, detail="Failed to update candidate")

    if updated is None:
        raise HTTPException(status_code=404, detail="Candidate not found")
    return updated


@router.delete("/{candidate_id}", response_model=MessageResponse)
def delete_candidate(candidate_id: int = Path(...), storage: Storage = Depends(get_storage)):
    try:
        deleted = storage.delete_candidate(candidate_id)
    except Exception:
        logger.exception(f"Error deleting candidate {candidate_id}")
        raise HTTPException(status_code=500, detail="Failed to delete candidate")

    if not deleted:
        raise HTTPException(status_code=404, detail="Candidate not found")
    return {"message": "Candidate deleted successfully"}
