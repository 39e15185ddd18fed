# votebox/storage.py
import logging
import threading
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from votebox import config
from votebox.models import Admin, Candidate, CandidateStats, Vote, VoteStats

logger = logging.getLogger(__name__)

# Fields an admin edit may touch; id and votes are never editable
EDITABLE_CANDIDATE_FIELDS = ("name", "experience", "symbolImage")


class StorageError(Exception):
    pass


class AlreadyVotedError(StorageError):
    def __init__(self, voter_token: str):
        super().__init__(f"Voter token {voter_token!r} has already voted")
        self.voter_token = voter_token


class CandidateNotFoundError(StorageError):
    def __init__(self, candidate_id: int):
        super().__init__(f"Candidate {candidate_id} not found")
        self.candidate_id = candidate_id


class DuplicateAdminError(StorageError):
    pass


def editable_fields(fields: Dict[str, Any]) -> Dict[str, Any]:
    return {k: v for k, v in fields.items() if k in EDITABLE_CANDIDATE_FIELDS}


def format_percentage(part: int, total: int) -> str:
    if total <= 0:
        return "0.0"
    return f"{part / total * 100:.1f}"


class Storage(ABC):
    """
    Contract shared by every storage backend.

    The request layer only talks to this interface; the concrete backend is
    picked once at startup by build_storage().
    """

    name = "abstract"

    @abstractmethod
    def list_candidates(self) -> List[Candidate]:
        """All candidates in creation order."""

    @abstractmethod
    def get_candidate(self, candidate_id: int) -> Optional[Candidate]:
        ...

    @abstractmethod
    def create_candidate(self, name: str, experience: str, symbol_image: Optional[str] = None) -> Candidate:
        ...

    @abstractmethod
    def update_candidate(self, candidate_id: int, fields: Dict[str, Any]) -> Optional[Candidate]:
        """
        Apply only the supplied editable fields.

        Returns the updated candidate, or None if candidate_id is unknown.
        """

    @abstractmethod
    def delete_candidate(self, candidate_id: int) -> bool:
        """Remove a candidate. Existing votes for it are kept."""

    @abstractmethod
    def list_votes(self) -> List[Vote]:
        ...

    @abstractmethod
    def has_voted(self, voter_token: str) -> bool:
        ...

    @abstractmethod
    def cast_vote(self, candidate_id: int, voter_token: str) -> Vote:
        """
        Store a vote and increment the candidate's tally as one step.

        Raises AlreadyVotedError if the token is already stored and
        CandidateNotFoundError if the candidate does not exist.
        """

    @abstractmethod
    def get_admin_by_username(self, username: str) -> Optional[Admin]:
        ...

    @abstractmethod
    def create_admin(self, username: str, password: str) -> Admin:
        ...

    def vote_stats(self) -> VoteStats:
        candidates = self.list_candidates()
        total = sum(c.votes for c in candidates)
        return VoteStats(
            candidates=[
                CandidateStats(
                    id=c.id,
                    name=c.name,
                    votes=c.votes,
                    percentage=format_percentage(c.votes, total),
                )
                for c in candidates
            ],
            totalVotes=total,
        )

    def close(self):
        pass


class MemStorage(Storage):
    """
    In-process storage with auto-incrementing ids.

    Every mutation runs under one lock, so the duplicate-token check, the
    vote insert and the tally increment of cast_vote cannot interleave with
    another request.
    """

    name = "memory"

    def __init__(self):
        self._lock = threading.Lock()
        self._candidates: Dict[int, Candidate] = {}
        self._votes: Dict[int, Vote] = {}
        self._votes_by_token: Dict[str, Vote] = {}
        self._admins: Dict[int, Admin] = {}
        self._next_candidate_id = 1
        self._next_vote_id = 1
        self._next_admin_id = 1

    def list_candidates(self) -> List[Candidate]:
        with self._lock:
            return [c.model_copy() for c in self._candidates.values()]

    def get_candidate(self, candidate_id: int) -> Optional[Candidate]:
        with self._lock:
            candidate = self._candidates.get(candidate_id)
            return candidate.model_copy() if candidate else None

    def create_candidate(self, name: str, experience: str, symbol_image: Optional[str] = None) -> Candidate:
        with self._lock:
            candidate = Candidate(
                id=self._next_candidate_id,
                name=name,
                experience=experience,
                symbolImage=symbol_image,
                votes=0,
            )
            self._next_candidate_id += 1
            self._candidates[candidate.id] = candidate
        logger.info(f"Candidate {candidate.id} created")
        return candidate.model_copy()

    def update_candidate(self, candidate_id: int, fields: Dict[str, Any]) -> Optional[Candidate]:
        with self._lock:
            existing = self._candidates.get(candidate_id)
            if existing is None:
                return None
            updated = existing.model_copy(update=editable_fields(fields))
            self._candidates[candidate_id] = updated
            return updated.model_copy()

    def delete_candidate(self, candidate_id: int) -> bool:
        with self._lock:
            removed = self._candidates.pop(candidate_id, None)
        if removed is not None:
            logger.info(f"Candidate {candidate_id} deleted")
        return removed is not None

    def list_votes(self) -> List[Vote]:
        with self._lock:
            return [v.model_copy() for v in self._votes.values()]

    def has_voted(self, voter_token: str) -> bool:
        with self._lock:
            return voter_token in self._votes_by_token

    def cast_vote(self, candidate_id: int, voter_token: str) -> Vote:
        with self._lock:
            if voter_token in self._votes_by_token:
                logger.warning(f"Rejected duplicate vote for candidate {candidate_id}")
                raise AlreadyVotedError(voter_token)
            candidate = self._candidates.get(candidate_id)
            if candidate is None:
                raise CandidateNotFoundError(candidate_id)

            vote = Vote(id=self._next_vote_id, candidateId=candidate_id, voterToken=voter_token)
            self._next_vote_id += 1
            self._votes[vote.id] = vote
            self._votes_by_token[voter_token] = vote
            self._candidates[candidate_id] = candidate.model_copy(update={"votes": candidate.votes + 1})
        logger.info(f"Vote {vote.id} recorded for candidate {candidate_id}")
        return vote.model_copy()

    def get_admin_by_username(self, username: str) -> Optional[Admin]:
        with self._lock:
            for admin in self._admins.values():
                if admin.username == username:
                    return admin.model_copy()
        return None

    def create_admin(self, username: str, password: str) -> Admin:
        with self._lock:
            if any(a.username == username for a in self._admins.values()):
                raise DuplicateAdminError(f"Admin {username} already exists")
            admin = Admin(id=self._next_admin_id, username=username, password=password)
            self._next_admin_id += 1
            self._admins[admin.id] = admin
        logger.info(f"Admin {username} created")
        return admin.model_copy()


def build_storage(backend: str = None) -> Storage:
    """Construct the storage backend named in configuration ("memory" or "mongo")."""
    backend = (backend or config.STORAGE_BACKEND).lower()
    if backend == "memory":
        return MemStorage()
    if backend == "mongo":
        from votebox.database.connection import connect
        from votebox.storage_mongo import MongoStorage

        client = connect(config.MONGO_URI)
        return MongoStorage(client[config.MONGO_DB], client=client, use_transactions=config.MONGO_TRANSACTIONS)
    raise ValueError(f"Unknown storage backend: {backend!r}")
