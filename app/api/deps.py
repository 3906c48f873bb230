"""API dependencies shared by the route modules.

- UserScope for the authenticated user (every journal query is scoped)
- SessionState for the current sign-in session (match selection)
- The shared LLM client
"""

from uuid import UUID

from fastapi import Depends

from app.core.auth import TokenClaims, require_current_claims, require_current_user_id
from app.core.config import settings
from app.domain.exceptions import ExternalServiceError
from app.domain.match_selection import SessionState, session_states
from app.domain.persistence import UserScope
from app.services.llm import BaseLLMClient, get_llm_client


async def get_user_scope(
    user_id: UUID = Depends(require_current_user_id)
) -> UserScope:
    """Journal namespace of the authenticated user. 401 when not signed in."""
    return UserScope(app_id=settings.APP_ID, user_id=user_id)


async def get_session_state(
    claims: TokenClaims = Depends(require_current_claims)
) -> SessionState:
    return session_states.get(claims.session_id)


async def get_llm() -> BaseLLMClient:
    """Shared LLM client. A missing API key surfaces as 502, like any AI failure."""
    try:
        return get_llm_client()
    except ValueError as e:
        raise ExternalServiceError("gemini", "AI service is not configured.") from e
