# files_manager/models/file.py
from sqlalchemy import Boolean, Column, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from files_manager.models import user  # noqa: F401  (owner relationship target)
from files_manager.models.database import Base

FOLDER = "folder"
FILE = "file"
IMAGE = "image"
VALID_TYPES = (FOLDER, FILE, IMAGE)

ROOT_PARENT_ID = 0  # parent_id of top-level nodes, never a real row


class FileNode(Base):
    __tablename__ = "files"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    type = Column(String(16), nullable=False)
    is_public = Column(Boolean, nullable=False, default=False)
    parent_id = Column(Integer, nullable=False, default=ROOT_PARENT_ID, index=True)
    local_path = Column(String, nullable=True)  # content locator, None for folders

    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    # Many files → one owner (User)
    owner = relationship("User", back_populates="files")

    def to_dict(self):
        return {
            "id": self.id,
            "userId": self.user_id,
            "name": self.name,
            "type": self.type,
            "isPublic": self.is_public,
            "parentId": self.parent_id,
        }
