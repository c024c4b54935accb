from dataclasses import dataclass

from pydantic import BaseModel, ConfigDict, Field, StrictInt, StrictStr


@dataclass
class User:
    """A user record as returned by the database gateway."""

    id: int
    username: str
    email: str | None = None
    full_name: str = ""
    school_name: str = ""
    rating: float | None = None
    password: str | None = None

    def __post_init__(self):
        if not self.username:
            raise ValueError("username is required")

    def public_profile(self) -> dict:
        return {
            "username": self.username,
            "full_name": self.full_name,
            "school_name": self.school_name,
            "email": self.email,
            "rating": self.rating,
        }


class SessionRecord(BaseModel):
    """Identity carried inside the signed session cookie."""

    model_config = ConfigDict(frozen=True)

    user_id: StrictInt = Field(..., ge=0)
    username: StrictStr
