from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from noisesentinel.database import Base
from noisesentinel.utils.dates import utcnow

CALIBRATED = "Calibrated"


class Iotdevice(Base):
    __tablename__ = "iot_devices"

    id = Column(Integer, primary_key=True, autoincrement=True)
    device_name = Column(String(100), nullable=False, unique=True)
    firmware_version = Column(String(50), nullable=True)
    calibration_date = Column(DateTime, nullable=True)
    calibration_status = Column(String(50), nullable=False, default=CALIBRATED)
    calibration_certificate_no = Column(String(100), nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    paired_officer_id = Column(Integer, ForeignKey("police_officers.id"), nullable=True)
    pairing_datetime = Column(DateTime, nullable=True)
    created_at = Column(DateTime, nullable=False, default=utcnow)

    paired_officer = relationship("Policeofficer", lazy="selectin")
