from sqlalchemy import Column, DateTime, Integer, String

from noisesentinel.database import Base
from noisesentinel.utils.dates import utcnow


class Accused(Base):
    __tablename__ = "accused"

    id = Column(Integer, primary_key=True, autoincrement=True)
    full_name = Column(String(255), nullable=False)
    cnic = Column(String(15), nullable=False, unique=True)
    city = Column(String(100), nullable=False)
    province = Column(String(100), nullable=False)
    address = Column(String(500), nullable=False)
    contact = Column(String(20), nullable=True)
    email = Column(String(255), nullable=True)
    created_at = Column(DateTime, nullable=False, default=utcnow)
