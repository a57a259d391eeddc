"""
Módulo de voz.
Contiene el feedback hablado y el mapeo de comandos de voz a acciones.
"""

from .commands import VoiceCommandMapper
from .feedback import VoiceFeedback

__all__ = ['VoiceCommandMapper', 'VoiceFeedback']
