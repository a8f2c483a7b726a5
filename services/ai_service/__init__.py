"""
AI service - provider/model selection and the responder that produces assistant turns.
"""

from .provider_selector import ProviderSelector
from .responder import Responder, SimulatedResponder, build_chat_history

__all__ = [
    'ProviderSelector',
    'Responder',
    'SimulatedResponder',
    'build_chat_history'
]
