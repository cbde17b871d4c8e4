from sqlalchemy import Boolean, Column, DateTime, Integer, String

from noisesentinel.database import Base
from noisesentinel.utils.dates import utcnow


class PublicStatusOtp(Base):
    __tablename__ = "public_status_otps"

    id = Column(Integer, primary_key=True, autoincrement=True)
    vehicle_no = Column(String(50), nullable=False)
    cnic = Column(String(15), nullable=False)
    email = Column(String(255), nullable=False)
    otp_code = Column(String(6), nullable=False)
    created_at = Column(DateTime, nullable=False, default=utcnow)
    expires_at = Column(DateTime, nullable=False)
    is_verified = Column(Boolean, nullable=False, default=False)
    access_token = Column(String(100), nullable=True, unique=True)
    access_token_expires_at = Column(DateTime, nullable=True)
