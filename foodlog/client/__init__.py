"""
Client Module - Black Box Interface

Purpose: Admin unlock state on the client side
Interface: AdminAuth.init(), login(), logout(), auth_headers()
Hidden: HTTP calls, local token cache format

Plays the role of the browser UI; any front end can drive it.
"""

from .admin_auth import AUTH_STORAGE_KEY, AdminAuth
from .storage import LocalStorage

__all__ = ["AUTH_STORAGE_KEY", "AdminAuth", "LocalStorage"]
