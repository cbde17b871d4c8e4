from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from noisesentinel.database import Base
from noisesentinel.utils.dates import utcnow


class Case(Base):
    __tablename__ = "cases"

    id = Column(Integer, primary_key=True, autoincrement=True)
    case_no = Column(String(50), nullable=False, unique=True)
    fir_id = Column(Integer, ForeignKey("firs.id"), nullable=False, unique=True)
    judge_id = Column(Integer, ForeignKey("judges.id"), nullable=True)
    case_type = Column(String(100), nullable=False, default="Traffic Violation")
    case_status = Column(String(50), nullable=False, default="Pending")
    hearing_date = Column(DateTime, nullable=True)
    verdict = Column(Text, nullable=True)
    created_at = Column(DateTime, nullable=False, default=utcnow)

    fir = relationship("Fir", back_populates="cases", lazy="selectin")
    judge = relationship("Judge", lazy="selectin")
    statements = relationship("Casestatement", back_populates="case")


class Casestatement(Base):
    __tablename__ = "case_statements"

    id = Column(Integer, primary_key=True, autoincrement=True)
    case_id = Column(Integer, ForeignKey("cases.id"), nullable=False)
    statement_by = Column(String(255), nullable=False)
    statement_text = Column(Text, nullable=False)
    statement_date = Column(DateTime, nullable=False, default=utcnow)

    case = relationship("Case", back_populates="statements", lazy="selectin")
