"""
Users Module - Black Box Interface

Purpose: Own user records, passwords and favorite-movie sets
Interface: CredentialStore (create_user, verify_password, get_user),
           FavoritesMutator (add_favorite, remove_favorite, update_user, delete_user)
Hidden: Redis key layout, bcrypt parameters, atomic claim/release of usernames

Replaceable with any document store offering atomic set and field updates.
"""

from .favorites import FavoritesMutator
from .store import CredentialStore
from .validation import collect_field_errors, ensure_valid

__all__ = ["CredentialStore", "FavoritesMutator", "collect_field_errors", "ensure_valid"]
