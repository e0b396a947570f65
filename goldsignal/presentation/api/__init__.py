"""REST API (FastAPI)."""
from goldsignal.presentation.api.routes import router

__all__ = ["router"]
