# roster/models/driver.py
import enum
from sqlalchemy import Column, Integer, String, Date, DateTime, func
from roster.database import Base


class DriverStatus(str, enum.Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    ON_LEAVE = "on_leave"
    ON_VACATION = "on_vacation"


class Driver(Base):
    __tablename__ = "drivers"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False, index=True)
    cpf = Column(String(11), unique=True, nullable=False)  # digits only
    admission_date = Column(Date, nullable=False)
    status = Column(String, nullable=False, default=DriverStatus.ACTIVE.value)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
