from sqlalchemy import Column, DateTime, Integer, String, func
from school_directory.core.database import Base

class School(Base):
    __tablename__ = "schools"
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    name = Column(String(100), nullable=False)
    address = Column(String(200), nullable=False)
    city = Column(String(50), nullable=False)
    state = Column(String(50), nullable=False)
    contact = Column(String(10), nullable=False)
    email = Column(String(100), nullable=False)
    image = Column(String(500), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
