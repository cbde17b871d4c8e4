from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from noisesentinel.database import Base
from noisesentinel.utils.dates import utcnow


class Policestation(Base):
    __tablename__ = "police_stations"

    id = Column(Integer, primary_key=True, autoincrement=True)
    station_name = Column(String(255), nullable=False)
    station_code = Column(String(50), nullable=False, unique=True)
    location = Column(String(255), nullable=True)
    district = Column(String(100), nullable=True)
    province = Column(String(100), nullable=False)
    contact = Column(String(20), nullable=True)
    created_at = Column(DateTime, nullable=False, default=utcnow)


class Policeofficer(Base):
    __tablename__ = "police_officers"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, unique=True)
    station_id = Column(Integer, ForeignKey("police_stations.id"), nullable=True)
    cnic = Column(String(15), nullable=False, unique=True)
    contact_no = Column(String(20), nullable=True)
    badge_number = Column(String(50), nullable=False, unique=True)
    rank = Column(String(50), nullable=True)
    is_investigation_officer = Column(Boolean, nullable=False, default=False)
    posting_date = Column(DateTime, nullable=True)

    user = relationship("User", lazy="selectin")
    station = relationship("Policestation", lazy="selectin")
