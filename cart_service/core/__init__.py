# Core modules

from .config import settings, get_settings, Settings
from .identity import CartIdentifier, CartOwnerKind, IdentifierResolver

__all__ = [
    "settings",
    "get_settings",
    "Settings",
    "CartIdentifier",
    "CartOwnerKind",
    "IdentifierResolver",
]
