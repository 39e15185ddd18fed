from pydantic import BaseModel, Field, StrictInt, model_validator
from typing import List, Optional

from votebox.models import AdminOut, CandidateStats


class CandidateCreate(BaseModel):
    name: str = Field(..., min_length=1)
    experience: str = Field(..., min_length=1)
    symbolImage: Optional[str] = None


class CandidateUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1)
    experience: Optional[str] = Field(None, min_length=1)
    symbolImage: Optional[str] = None

    @model_validator(mode="after")
    def required_fields_not_null(self):
        # name/experience may be omitted but never cleared
        for field in ("name", "experience"):
            if field in self.model_fields_set and getattr(self, field) is None:
                raise ValueError(f"{field} cannot be null")
        return self


class VoteCreate(BaseModel):
    candidateId: StrictInt  # no coercion from "1", 1.0 or true
    voterToken: str = Field(..., min_length=1)


class AdminLogin(BaseModel):
    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class VoteCheckResponse(BaseModel):
    hasVoted: bool


class VoteStatsResponse(BaseModel):
    candidates: List[CandidateStats]
    totalVotes: int
    turnoutPercentage: Optional[str] = None  # null when no eligible-voter count is configured


class AdminLoginResponse(BaseModel):
    message: str
    admin: AdminOut


class MessageResponse(BaseModel):
    message: str
