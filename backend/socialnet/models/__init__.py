from socialnet.models.refresh_token import RefreshToken
from socialnet.models.user import User

__all__ = [
    "RefreshToken",
    "User",
]
