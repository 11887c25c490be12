"""Staff accounts for the admin queue"""

import enum
import uuid
from datetime import datetime
from sqlalchemy import Column, String, Boolean, DateTime, Enum

from app.database import Base


class UserRole(str, enum.Enum):
    """Admins also move tables and take payments"""
    ADMIN = "admin"
    STAFF = "staff"


ROLE_RANK = {
    UserRole.STAFF: 1,
    UserRole.ADMIN: 2,
}


class User(Base):
    """Waiter or admin able to sign in to the staff screens"""
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    email = Column(String(255), unique=True, nullable=False)
    hashed_password = Column(String(255), nullable=False)
    full_name = Column(String(255))
    role = Column(Enum(UserRole), default=UserRole.STAFF)
    is_active = Column(Boolean, default=True)

    # Current refresh token; rotated on refresh, cleared on logout
    refresh_token = Column(String(500))

    last_login = Column(DateTime)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def has_permission(self, required_role: UserRole) -> bool:
        """True if this user's role ranks at least as high as required_role"""
        return ROLE_RANK.get(self.role, 0) >= ROLE_RANK.get(required_role, 0)
