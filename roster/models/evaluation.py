# roster/models/evaluation.py
from sqlalchemy import Column, Integer, String, Text, Float, Date, DateTime, ForeignKey, func
from roster.database import Base

# Scores are typed on a 1-10 scale and stored multiplied by this factor
SCORE_SCALE = 10


class EvaluationItem(Base):
    __tablename__ = "evaluation_items"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    weight = Column(Integer, nullable=False, default=2)  # 1-5
    created_at = Column(DateTime(timezone=True), server_default=func.now())


class DriverEvaluation(Base):
    __tablename__ = "driver_evaluations"

    id = Column(Integer, primary_key=True, index=True)
    driver_id = Column(Integer, ForeignKey("drivers.id"), nullable=False, index=True)
    evaluation_item_id = Column(Integer, ForeignKey("evaluation_items.id", ondelete="CASCADE"), nullable=False)
    score = Column(Float, nullable=False)  # 10-100
    notes = Column(Text, nullable=True)
    evaluator_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    evaluated_at = Column(DateTime(timezone=True), server_default=func.now())


class MonthlyRating(Base):
    __tablename__ = "monthly_ratings"

    id = Column(Integer, primary_key=True, index=True)
    driver_id = Column(Integer, ForeignKey("drivers.id"), nullable=False, index=True)
    month = Column(Date, nullable=False)  # first day of the month
    score = Column(Float, nullable=False)  # 0-10
    comments = Column(Text, nullable=True)
    status = Column(String, nullable=False, default="filled")
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())
