# roster/models/user.py
import enum
from sqlalchemy import Column, Integer, String, Boolean, DateTime, JSON, func
from roster.database import Base


class Role(str, enum.Enum):
    STANDARD = "standard"
    ADMINISTRATOR = "administrator"
    DIRECTOR = "director"


ROLE_LEVELS = {
    Role.STANDARD: 1,
    Role.ADMINISTRATOR: 2,
    Role.DIRECTOR: 3,
}


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String, unique=True, index=True, nullable=False)
    full_name = Column(String, nullable=True)
    phone_number = Column(String, nullable=True)
    hashed_password = Column(String, nullable=False)
    role = Column(String, nullable=False, default=Role.STANDARD.value, server_default=Role.STANDARD.value)
    department = Column(String, nullable=True)
    communication_preference = Column(String, nullable=True)  # email, phone, both
    permissions = Column(JSON, nullable=True)  # {"access_level": ..., "modules": {...}}
    security_question = Column(String, nullable=True)
    security_answer_hash = Column(String, nullable=True)
    corporate_email = Column(String, nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    last_login = Column(DateTime(timezone=True), nullable=True)
