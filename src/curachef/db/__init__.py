"""
CuraChef - User storage.
"""

from curachef.db.users import JsonUserStore, get_user_store

__all__ = ["JsonUserStore", "get_user_store"]
