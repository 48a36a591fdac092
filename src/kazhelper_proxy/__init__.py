from .config import ProxyConfig
from .contracts import CompletionFailure, CompletionRequest, CompletionResult, ProviderConfig
from .fallback import FallbackOrchestrator
from .provider import ChatProvider

__all__ = [
    "ChatProvider",
    "CompletionFailure",
    "CompletionRequest",
    "CompletionResult",
    "FallbackOrchestrator",
    "ProviderConfig",
    "ProxyConfig",
]
