from pydantic import BaseModel, Field
from typing import Optional


class Candidate(BaseModel):
    id: int
    name: str
    experience: str
    symbolImage: Optional[str] = None  # URL
    votes: int = Field(default=0, ge=0)
