"""
foodlog - admin access for a personal food tracker

Architecture:
- Each module is self-contained with clear interfaces
- Modules are completely replaceable
- No module knows the internals of another
- All communication through defined interfaces

Modules:
- auth: PIN login, session validation, logout
- storage: Session token persistence (Redis or in-memory)
- api: Request/response models for the /auth endpoints
- client: Client-side admin state with a locally cached token
"""

__version__ = "1.0.0"
