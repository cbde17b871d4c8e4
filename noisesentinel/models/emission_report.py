from sqlalchemy import Column, DateTime, ForeignKey, Integer, Numeric, String
from sqlalchemy.orm import relationship

from noisesentinel.database import Base
from noisesentinel.utils.dates import utcnow


class EmissionReport(Base):
    __tablename__ = "emission_reports"

    id = Column(Integer, primary_key=True, autoincrement=True)
    device_id = Column(Integer, ForeignKey("iot_devices.id"), nullable=False)
    co = Column(Numeric(10, 2), nullable=True)
    co2 = Column(Numeric(10, 2), nullable=True)
    hc = Column(Numeric(10, 2), nullable=True)
    nox = Column(Numeric(10, 2), nullable=True)
    sound_level_dba = Column(Numeric(10, 2), nullable=False)
    test_datetime = Column(DateTime, nullable=False)
    ml_classification = Column(String(100), nullable=True)
    digital_signature_value = Column(String(255), nullable=False)
    created_at = Column(DateTime, nullable=False, default=utcnow)

    device = relationship("Iotdevice", lazy="selectin")
    challans = relationship("Challan", back_populates="emission_report")
