# Data Transfer Objects (DTOs)
# Request/response models for API endpoints

from app.models.dto.auth import (
    SignUpRequest,
    SignInRequest,
    FederatedSignInRequest,
    TokenResponse,
    AuthState,
)
from app.models.dto.dreams import (
    AnalysisFormat,
    AnalysisSection,
    AnalysisView,
    ArchivedDreamDetail,
    HolisticAnalysisRequest,
    AdHocAnalysisRequest,
    AnalysisResult,
    SuggestionResponse,
)
from app.models.dto.reality import ChatMessageCreate, ConversationRead, ChatReply
from app.models.dto.search import SearchResults, SelectionKind, SelectionUpdate, SelectionState
from app.models.dto.stats import StatsTotals, DreamFieldStats, TermCount, InsightStats

__all__ = [
    "SignUpRequest",
    "SignInRequest",
    "FederatedSignInRequest",
    "TokenResponse",
    "AuthState",
    "AnalysisFormat",
    "AnalysisSection",
    "AnalysisView",
    "ArchivedDreamDetail",
    "HolisticAnalysisRequest",
    "AdHocAnalysisRequest",
    "AnalysisResult",
    "SuggestionResponse",
    "ChatMessageCreate",
    "ConversationRead",
    "ChatReply",
    "SearchResults",
    "SelectionKind",
    "SelectionUpdate",
    "SelectionState",
    "StatsTotals",
    "DreamFieldStats",
    "TermCount",
    "InsightStats",
]
