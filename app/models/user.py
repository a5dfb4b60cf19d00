import enum
from sqlalchemy import Column, Integer, String, Boolean, ForeignKey, Enum
from sqlalchemy.orm import relationship
from app.database import Base, TimestampMixin

class UserRole(str, enum.Enum):
    admin = "admin"
    travel_manager = "travel_manager"
    traveler = "traveler"

class User(Base, TimestampMixin):
    __tablename__ = "user"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String, unique=True, index=True, nullable=False)
    organization_id = Column(Integer, ForeignKey("organization.id", ondelete="CASCADE"), nullable=False)
    role = Column(Enum(UserRole), nullable=False, default=UserRole.traveler)
    is_active = Column(Boolean, default=True)

    organization = relationship("Organization", back_populates="users")
    onboarding = relationship("OnboardingProgress", back_populates="user", uselist=False)
