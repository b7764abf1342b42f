"""Authentication package for the application."""
from .models import Token, TokenData, UserCreate, UserResponse
from .service import AuthService, get_current_user, get_current_active_user
from .router import router as auth_router

__all__ = [
    'Token',
    'TokenData',
    'UserCreate',
    'UserResponse',
    'AuthService',
    'get_current_user',
    'get_current_active_user',
    'auth_router'
]
