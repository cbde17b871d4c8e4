from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from noisesentinel.database import Base

UNPAID = "Unpaid"


class Challan(Base):
    __tablename__ = "challans"

    id = Column(Integer, primary_key=True, autoincrement=True)
    officer_id = Column(Integer, ForeignKey("police_officers.id"), nullable=False)
    accused_id = Column(Integer, ForeignKey("accused.id"), nullable=False)
    vehicle_id = Column(Integer, ForeignKey("vehicles.id"), nullable=False)
    violation_id = Column(Integer, ForeignKey("violations.id"), nullable=False)
    emission_report_id = Column(Integer, ForeignKey("emission_reports.id"), nullable=True)
    evidence_path = Column(Text, nullable=True)
    issue_datetime = Column(DateTime, nullable=False)
    due_datetime = Column(DateTime, nullable=False)
    status = Column(String(50), nullable=False, default=UNPAID)
    bank_details = Column(String(255), nullable=True)
    digital_signature_value = Column(String(255), nullable=True)

    officer = relationship("Policeofficer", lazy="selectin")
    accused = relationship("Accused", lazy="selectin")
    vehicle = relationship("Vehicle", lazy="selectin")
    violation = relationship("Violation", lazy="selectin")
    emission_report = relationship("EmissionReport", back_populates="challans", lazy="selectin")
    firs = relationship("Fir", back_populates="challan")
