"""
FastAPI dependencies: Supabase client, bearer-token auth, AI client and the
onboarding store.
"""

from functools import lru_cache
from typing import Dict, Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from supabase import Client

from .ai_client import TextGenerator
from .exceptions import AuthenticationError
from .onboarding import OnboardingStore
from .supabase_client import get_client, verify_access_token

# auto_error off so a missing header becomes our 401 body, not FastAPI's 403
bearer = HTTPBearer(auto_error=False)


def get_supabase() -> Client:
    return get_client()


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer),
    sb: Client = Depends(get_supabase),
) -> Dict:
    """Resolve the Supabase user behind `Authorization: Bearer <access token>`."""
    if credentials is None or not credentials.credentials:
        raise AuthenticationError("missing bearer token")
    return verify_access_token(sb, credentials.credentials)


@lru_cache(maxsize=1)
def get_text_generator() -> TextGenerator:
    return TextGenerator()


def get_onboarding_store(request: Request) -> OnboardingStore:
    return OnboardingStore(request.session)
