"""
Traducción de comandos de voz reconocidos a acciones de la calculadora.

El reconocedor de voz queda fuera de este módulo: quien lo use entrega el
texto reconocido y su confianza a VoiceCommandMapper.
"""

import unicodedata

from calculadora.core.actions import Action, ActionKind, digit, operator


def normalize_utterance(text):
    """Minúsculas, sin tildes y con espacios simples ("Raíz " → "raiz")."""
    decomposed = unicodedata.normalize("NFKD", text.lower())
    stripped = "".join(c for c in decomposed if not unicodedata.combining(c))
    return " ".join(stripped.split())


_NUMBERS = ["cero", "uno", "dos", "tres", "cuatro",
            "cinco", "seis", "siete", "ocho", "nueve"]

VOICE_COMMANDS = {name: digit(value) for value, name in enumerate(_NUMBERS)}
VOICE_COMMANDS.update({
    "mas": operator("+"),
    "menos": operator("-"),
    "por": operator("*"),
    "dividido": operator("/"),
    "elevado": operator("^"),
    "igual": Action(ActionKind.EQUALS),
    "punto": Action(ActionKind.DECIMAL),
    "coma": Action(ActionKind.DECIMAL),
    "borrar": Action(ActionKind.CLEAR),
    "borrar entrada": Action(ActionKind.CLEAR_ENTRY),
    "atras": Action(ActionKind.DELETE),
    "por ciento": Action(ActionKind.PERCENT),
    "signo": Action(ActionKind.SIGN),
    "seno": Action(ActionKind.SIN),
    "coseno": Action(ActionKind.COS),
    "tangente": Action(ActionKind.TAN),
    "raiz": Action(ActionKind.SQRT),
    "factorial": Action(ActionKind.FACTORIAL),
    "memoria mas": Action(ActionKind.MEMORY_ADD),
    "memoria menos": Action(ActionKind.MEMORY_SUBTRACT),
    "recuperar memoria": Action(ActionKind.MEMORY_RECALL),
    "borrar memoria": Action(ActionKind.MEMORY_CLEAR),
})


# ============================================================================
# CLASE: VoiceCommandMapper
# Propósito: Filtrar reconocimientos por confianza y mapearlos 1:1 a acciones
# ============================================================================
class VoiceCommandMapper:
    """
    Adaptador de entrada por voz.

    Uso:
        mapper = VoiceCommandMapper(config, queue.put)
        reconocedor.on_result = mapper.on_speech_recognized
    """

    def __init__(self, config, sink=None):
        """
        Args:
            config (AccessibilityConfig): Aporta voice_confidence_threshold
            sink (callable): Recibe cada Action aceptada (ej: ActionQueue.put)
        """
        self.config = config
        self.sink = sink

    def map(self, text, confidence):
        """
        Returns:
            Action | None: None si la confianza no alcanza el umbral o el
                texto no es un comando conocido
        """
        if confidence < self.config.voice_confidence_threshold:
            return None
        return VOICE_COMMANDS.get(normalize_utterance(text))

    def on_speech_recognized(self, text, confidence):
        """Callback del reconocedor; devuelve True si se despachó una acción."""
        action = self.map(text, confidence)
        if action is None:
            return False
        if self.sink:
            self.sink(action)
        return True
