# switchboard/core/rate_limit.py

from slowapi import Limiter
from slowapi.util import get_remote_address

from switchboard.core.config import settings

# Initialize limiter
limiter = Limiter(key_func=get_remote_address, enabled=settings.rate_limit_enabled)

# Rate limit constants
SEND_MESSAGE_LIMIT = settings.send_rate_limit
