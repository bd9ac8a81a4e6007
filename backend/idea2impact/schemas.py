from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator
from typing import Optional

class RegistrationSubmission(BaseModel):
    """Body of POST /send-registration, trimmed and normalized"""

    name: str = Field(min_length=1)
    email: EmailStr
    phone: str = Field(min_length=1)
    college: str = Field(min_length=1)
    year: str = Field(min_length=1)
    department: str = Field(min_length=1)
    team_size: str = Field(alias="teamSize", min_length=1)
    experience: Optional[str] = None
    skills: Optional[str] = None
    motivation: Optional[str] = None

    model_config = ConfigDict(str_strip_whitespace=True, populate_by_name=True)

    @field_validator("*", mode="before")
    @classmethod
    def numbers_as_text(cls, value):
        # Select inputs sometimes post year/teamSize as numbers
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value

    @field_validator("email", mode="before")
    @classmethod
    def lowercase_email(cls, value):
        if isinstance(value, str):
            return value.strip().lower()
        return value

    @field_validator("experience", "skills", "motivation")
    @classmethod
    def blank_as_missing(cls, value):
        return value or None

    def to_fields(self) -> dict:
        """Keyword arguments for the Registration model"""
        return self.model_dump()

class SubmissionData(BaseModel):
    registrationId: str
    emailMessageId: Optional[str] = None

class SubmissionResponse(BaseModel):
    success: bool
    message: str
    id: Optional[str] = None
    data: Optional[SubmissionData] = None
