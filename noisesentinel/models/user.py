from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from noisesentinel.database import Base
from noisesentinel.utils.dates import utcnow


class Role(Base):
    __tablename__ = "roles"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(50), nullable=False, unique=True)


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String(100), nullable=False, unique=True)
    email = Column(String(255), nullable=False, unique=True)
    full_name = Column(String(255), nullable=False)
    password_hash = Column(String, nullable=False)
    role_id = Column(Integer, ForeignKey("roles.id"), nullable=False)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, nullable=False, default=utcnow)
    last_login_at = Column(DateTime, nullable=True)
    password_changed_at = Column(DateTime, nullable=True)
    reset_otp = Column(String(6), nullable=True)
    reset_otp_expires_at = Column(DateTime, nullable=True)

    role = relationship("Role", lazy="selectin")


ADMIN = "Admin"
COURT_AUTHORITY = "Court Authority"
STATION_AUTHORITY = "Station Authority"
JUDGE = "Judge"
POLICE_OFFICER = "Police Officer"

ALL_ROLES = (ADMIN, COURT_AUTHORITY, STATION_AUTHORITY, JUDGE, POLICE_OFFICER)
