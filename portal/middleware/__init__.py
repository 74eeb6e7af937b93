"""
Middleware package for the member portal.
"""
from .auth import require_auth, require_admin, require_cron_secret, get_bearer_token
