"""API module for SoundBridge.

Struktur:
- routers/: HTTP endpoints (auth, health)
- dependencies.py: Dependency Injection (services from app.state)
- exception_handlers.py: Global error handlers
"""

from soundbridge.api.routers import api_router, auth, health

__all__ = ["api_router", "auth", "health"]
