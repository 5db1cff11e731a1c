from models.base_model import Base, BaseModel
from sqlalchemy import Column, String


class User(BaseModel, Base):
    """
    One row per account.

    token_id/token_slug form the current refresh rotation slot: both are
    replaced on every login and read (never written) on refresh.
    storage_dir namespaces the user's blobs and never changes.
    """
    __tablename__ = "users"
    __private__ = ("pass_hash", "token_id", "token_slug")

    username = Column(String(255), nullable=False, unique=True, index=True)
    pass_hash = Column(String(255), nullable=False)
    token_slug = Column(String(255), nullable=True)
    token_id = Column(String(64), nullable=True, index=True)
    storage_dir = Column(String(64), nullable=False, unique=True)

    @property
    def password(self):
        raise AttributeError("Password: Write-only field")

    def __repr__(self):
        return f"<User id={self.id} username={self.username}>"
