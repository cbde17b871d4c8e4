from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from noisesentinel.database import Base


class Fir(Base):
    __tablename__ = "firs"

    id = Column(Integer, primary_key=True, autoincrement=True)
    fir_no = Column(String(50), nullable=False, unique=True)
    station_id = Column(Integer, ForeignKey("police_stations.id"), nullable=False)
    challan_id = Column(Integer, ForeignKey("challans.id"), nullable=False, unique=True)
    date_filed = Column(DateTime, nullable=False)
    fir_description = Column(Text, nullable=True)
    fir_status = Column(String(50), nullable=False, default="Filed")
    informant_id = Column(Integer, ForeignKey("police_officers.id"), nullable=True)
    investigation_report = Column(Text, nullable=True)

    station = relationship("Policestation", lazy="selectin")
    challan = relationship("Challan", back_populates="firs", lazy="selectin")
    informant = relationship("Policeofficer", lazy="selectin")
    cases = relationship("Case", back_populates="fir")
