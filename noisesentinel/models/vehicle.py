from sqlalchemy import Column, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from noisesentinel.database import Base
from noisesentinel.utils.dates import utcnow


class Vehicle(Base):
    __tablename__ = "vehicles"

    id = Column(Integer, primary_key=True, autoincrement=True)
    plate_number = Column(String(50), nullable=False, unique=True)
    make = Column(String(100), nullable=True)
    color = Column(String(50), nullable=True)
    chassis_no = Column(String(100), nullable=True)
    engine_no = Column(String(100), nullable=True)
    reg_year = Column(Integer, nullable=True)
    owner_id = Column(Integer, ForeignKey("accused.id"), nullable=True)
    created_at = Column(DateTime, nullable=False, default=utcnow)

    owner = relationship("Accused", lazy="selectin")
