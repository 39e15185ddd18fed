# votebox/storage_mongo.py
import logging
from typing import Any, Dict, List, Optional

from pymongo import ASCENDING, ReturnDocument
from pymongo.errors import DuplicateKeyError, OperationFailure

from votebox.models import Admin, Candidate, Vote
from votebox.storage import (
    AlreadyVotedError,
    CandidateNotFoundError,
    DuplicateAdminError,
    Storage,
    editable_fields,
)

logger = logging.getLogger(__name__)

CANDIDATES_COLLECTION_NAME = "candidates"
VOTES_COLLECTION_NAME = "votes"
ADMINS_COLLECTION_NAME = "admins"
COUNTERS_COLLECTION_NAME = "counters"

# Server error code for a transaction write conflict
WRITE_CONFLICT = 112


def _candidate(doc: Dict[str, Any]) -> Candidate:
    return Candidate(
        id=doc["_id"],
        name=doc["name"],
        experience=doc["experience"],
        symbolImage=doc.get("symbolImage"),
        votes=doc.get("votes", 0),
    )


def _vote(doc: Dict[str, Any]) -> Vote:
    return Vote(id=doc["_id"], candidateId=doc["candidateId"], voterToken=doc["voterToken"])


def _admin(doc: Dict[str, Any]) -> Admin:
    return Admin(id=doc["_id"], username=doc["username"], password=doc["password"])


class MongoStorage(Storage):
    """
    MongoDB-backed storage.

    Documents use integer ``_id`` values drawn from a counters collection so
    ids stay monotonically increasing like the in-memory backend. The unique
    index on ``votes.voterToken`` is what serializes concurrent casts for the
    same token.
    """

    name = "mongo"

    def __init__(self, db, client=None, use_transactions: bool = False):
        """
        Args:
            db: a pymongo Database (or any object with the same API)
            client: owning MongoClient, closed by close() and used for sessions
            use_transactions: run cast_vote in a multi-document transaction
        """
        self.db = db
        self.client = client
        self.use_transactions = use_transactions and client is not None
        self.candidates = db[CANDIDATES_COLLECTION_NAME]
        self.votes = db[VOTES_COLLECTION_NAME]
        self.admins = db[ADMINS_COLLECTION_NAME]
        self.counters = db[COUNTERS_COLLECTION_NAME]

        # Create unique indexes to prevent duplicates
        self.votes.create_index("voterToken", unique=True)
        self.admins.create_index("username", unique=True)

    def _next_id(self, sequence: str, session=None) -> int:
        kwargs = {"session": session} if session is not None else {}
        counter = self.counters.find_one_and_update(
            {"_id": sequence},
            {"$inc": {"value": 1}},
            upsert=True,
            return_document=ReturnDocument.AFTER,
            **kwargs,
        )
        return counter["value"]

    def list_candidates(self) -> List[Candidate]:
        return [_candidate(doc) for doc in self.candidates.find({}).sort("_id", ASCENDING)]

    def get_candidate(self, candidate_id: int) -> Optional[Candidate]:
        doc = self.candidates.find_one({"_id": candidate_id})
        return _candidate(doc) if doc else None

    def create_candidate(self, name: str, experience: str, symbol_image: Optional[str] = None) -> Candidate:
        doc = {
            "_id": self._next_id(CANDIDATES_COLLECTION_NAME),
            "name": name,
            "experience": experience,
            "symbolImage": symbol_image,
            "votes": 0,
        }
        self.candidates.insert_one(doc)
        logger.info(f"Candidate {doc['_id']} created")
        return _candidate(doc)

    def update_candidate(self, candidate_id: int, fields: Dict[str, Any]) -> Optional[Candidate]:
        changes = editable_fields(fields)
        if not changes:
            return self.get_candidate(candidate_id)
        doc = self.candidates.find_one_and_update(
            {"_id": candidate_id},
            {"$set": changes},
            return_document=ReturnDocument.AFTER,
        )
        return _candidate(doc) if doc else None

    def delete_candidate(self, candidate_id: int) -> bool:
        result = self.candidates.delete_one({"_id": candidate_id})
        if result.deleted_count > 0:
            logger.info(f"Candidate {candidate_id} deleted")
            return True
        return False

    def list_votes(self) -> List[Vote]:
        return [_vote(doc) for doc in self.votes.find({}).sort("_id", ASCENDING)]

    def has_voted(self, voter_token: str) -> bool:
        return self.votes.find_one({"voterToken": voter_token}) is not None

    def cast_vote(self, candidate_id: int, voter_token: str) -> Vote:
        if not self.use_transactions:
            return self._cast_vote(candidate_id, voter_token)

        try:
            with self.client.start_session() as session:
                # with_transaction retries transient write conflicts; a retry
                # after the competing cast commits hits the unique index instead
                return session.with_transaction(
                    lambda s: self._cast_vote(candidate_id, voter_token, session=s)
                )
        except OperationFailure as e:
            if not (e.has_error_label("TransientTransactionError") or e.code == WRITE_CONFLICT):
                raise
            if self.has_voted(voter_token):
                logger.warning(f"Rejected duplicate vote for candidate {candidate_id} after write conflict")
                raise AlreadyVotedError(voter_token)
            raise

    def _cast_vote(self, candidate_id: int, voter_token: str, session=None) -> Vote:
        kwargs = {"session": session} if session is not None else {}

        if self.candidates.find_one({"_id": candidate_id}, **kwargs) is None:
            raise CandidateNotFoundError(candidate_id)

        doc = {
            "_id": self._next_id(VOTES_COLLECTION_NAME, session=session),
            "candidateId": candidate_id,
            "voterToken": voter_token,
        }
        try:
            self.votes.insert_one(doc, **kwargs)
        except DuplicateKeyError:
            logger.warning(f"Rejected duplicate vote for candidate {candidate_id}")
            raise AlreadyVotedError(voter_token)

        # Outside a transaction the vote is already stored, so any failure
        # from here on must remove it again
        try:
            result = self.candidates.update_one({"_id": candidate_id}, {"$inc": {"votes": 1}}, **kwargs)
            if result.matched_count == 0:
                # Candidate deleted between the check and the increment
                raise CandidateNotFoundError(candidate_id)
        except Exception:
            if session is None:
                self.votes.delete_one({"_id": doc["_id"]})
                logger.warning(f"Vote {doc['_id']} removed after failed tally update")
            raise

        logger.info(f"Vote {doc['_id']} recorded for candidate {candidate_id}")
        return _vote(doc)

    def get_admin_by_username(self, username: str) -> Optional[Admin]:
        doc = self.admins.find_one({"username": username})
        return _admin(doc) if doc else None

    def create_admin(self, username: str, password: str) -> Admin:
        doc = {"_id": self._next_id(ADMINS_COLLECTION_NAME), "username": username, "password": password}
        try:
            self.admins.insert_one(doc)
        except DuplicateKeyError:
            raise DuplicateAdminError(f"Admin {username} already exists")
        logger.info(f"Admin {username} created")
        return _admin(doc)

    def close(self):
        """Close MongoDB connection"""
        if self.client is not None:
            self.client.close()
            logger.info("MongoDB connection closed")
