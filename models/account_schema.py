from datetime import datetime
from typing import Optional

from pydantic import BaseModel


# Response Schemas
class UserResponse(BaseModel):
    attemptsLeft: int
    email: str = ""
    lastLogin: Optional[datetime] = None
