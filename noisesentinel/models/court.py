from sqlalchemy import Column, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from noisesentinel.database import Base


class Courttype(Base):
    __tablename__ = "court_types"

    id = Column(Integer, primary_key=True, autoincrement=True)
    court_type_name = Column(String(100), nullable=False, unique=True)


class Court(Base):
    __tablename__ = "courts"

    id = Column(Integer, primary_key=True, autoincrement=True)
    court_name = Column(String(255), nullable=False)
    court_type_id = Column(Integer, ForeignKey("court_types.id"), nullable=False)
    location = Column(String(255), nullable=True)
    district = Column(String(100), nullable=True)
    province = Column(String(100), nullable=False)

    court_type = relationship("Courttype", lazy="selectin")


class Judge(Base):
    __tablename__ = "judges"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, unique=True)
    court_id = Column(Integer, ForeignKey("courts.id"), nullable=True)
    cnic = Column(String(15), nullable=False, unique=True)
    contact_no = Column(String(20), nullable=True)
    rank = Column(String(50), nullable=True)
    service_status = Column(String(50), nullable=False, default="Active")

    user = relationship("User", lazy="selectin")
    court = relationship("Court", lazy="selectin")
