from sqlalchemy import Column, Integer, String
from sqlalchemy.orm import relationship

from files_manager.models.database import Base


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), unique=True, index=True, nullable=False)
    password = Column(String(255), nullable=False)  # sha1 hex or werkzeug hash

    # One user → many files
    files = relationship("FileNode", back_populates="owner")

    def to_dict(self):
        return {"id": self.id, "email": self.email}
