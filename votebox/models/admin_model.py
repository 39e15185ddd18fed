from pydantic import BaseModel


class Admin(BaseModel):
    id: int
    username: str
    password: str  # plaintext or a passlib hash, see security.py


class AdminOut(BaseModel):
    id: int
    username: str
