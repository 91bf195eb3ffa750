# models/__init__.py
from models.base import Base
from models.profile import Profile
from models.media_item import MediaItem

__all__ = [
    "Base",
    "Profile",
    "MediaItem",
]
