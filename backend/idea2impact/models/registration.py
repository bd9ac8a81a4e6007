from sqlalchemy import Column, String, Text
from sqlalchemy.orm import validates

from idea2impact.db.base import Base, BaseModel

REQUIRED_FIELDS = ("name", "email", "phone", "college", "year", "department", "team_size")
OPTIONAL_FIELDS = ("experience", "skills", "motivation")

# Fields stored trimmed, mirroring the form's schema
TRIMMED_FIELDS = ("name", "email", "phone", "college", "department",
                  "experience", "skills", "motivation")


class Registration(Base, BaseModel):
    __tablename__ = "registrations"

    # Required
    name = Column(String, nullable=False)
    email = Column(String, nullable=False)  # no unique constraint, resubmissions are kept
    phone = Column(String, nullable=False)
    college = Column(String, nullable=False)
    year = Column(String, nullable=False)
    department = Column(String, nullable=False)
    team_size = Column("teamSize", String, nullable=False)

    # Optional
    experience = Column(Text, nullable=True)
    skills = Column(Text, nullable=True)
    motivation = Column(Text, nullable=True)

    @validates(*TRIMMED_FIELDS)
    def _trim(self, key, value):
        if value is None:
            return None
        value = value.strip()
        if key == "email":
            value = value.lower()
        if key in OPTIONAL_FIELDS and not value:
            return None
        return value

    def to_dict(self) -> dict:
        """Wire representation (camelCase keys, ISO timestamps)"""
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "phone": self.phone,
            "college": self.college,
            "year": self.year,
            "department": self.department,
            "teamSize": self.team_size,
            "experience": self.experience,
            "skills": self.skills,
            "motivation": self.motivation,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
            "updatedAt": self.updated_at.isoformat() if self.updated_at else None,
        }

    def __repr__(self):
        return f"<Registration {self.name} ({self.email})>"
