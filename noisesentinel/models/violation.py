from sqlalchemy import Boolean, Column, DateTime, Integer, Numeric, String, Text

from noisesentinel.database import Base
from noisesentinel.utils.dates import utcnow


class Violation(Base):
    __tablename__ = "violations"

    id = Column(Integer, primary_key=True, autoincrement=True)
    violation_type = Column(String(255), nullable=False, unique=True)
    description = Column(Text, nullable=True)
    penalty_amount = Column(Numeric(10, 2), nullable=False)
    section_of_law = Column(String(255), nullable=True)
    is_cognizable = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, nullable=False, default=utcnow)
