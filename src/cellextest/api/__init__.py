"""Backend API client exports."""
from .auth import AuthContext, extract_token
from .client import ApiClient, ApiResponse

__all__ = ["AuthContext", "ApiClient", "ApiResponse", "extract_token"]
