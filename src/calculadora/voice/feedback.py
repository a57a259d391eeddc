"""
Sistema de feedback por voz usando pyttsx3.

Este módulo anuncia en voz alta las acciones aplicadas y los resultados,
ejecutando la síntesis en un hilo aparte para no bloquear el bucle principal.
"""

import threading
from collections import deque

import pyttsx3

from calculadora.core.actions import ActionKind
from calculadora.core.formatting import ERROR_TEXT


NUMBER_WORDS = {
    "0": "cero", "1": "uno", "2": "dos", "3": "tres", "4": "cuatro",
    "5": "cinco", "6": "seis", "7": "siete", "8": "ocho", "9": "nueve",
}

OPERATION_WORDS = {
    "+": "más",
    "-": "menos",
    "*": "por",
    "/": "dividido",
    "^": "elevado a",
}

ACTION_WORDS = {
    ActionKind.DECIMAL: "punto",
    ActionKind.SIGN: "cambio de signo",
    ActionKind.DELETE: "borrado",
    ActionKind.CLEAR: "todo borrado",
    ActionKind.CLEAR_ENTRY: "entrada borrada",
    ActionKind.MEMORY_ADD: "memoria más",
    ActionKind.MEMORY_SUBTRACT: "memoria menos",
    ActionKind.MEMORY_CLEAR: "memoria borrada",
}

# Acciones cuyo efecto se anuncia leyendo el display
RESULT_ACTIONS = (
    ActionKind.EQUALS, ActionKind.PERCENT, ActionKind.SIN, ActionKind.COS,
    ActionKind.TAN, ActionKind.SQRT, ActionKind.FACTORIAL, ActionKind.MEMORY_RECALL,
)


def spoken_number(text):
    """Texto del display en forma pronunciable ("-2.5" → "menos 2 coma 5")."""
    if text == ERROR_TEXT:
        return "error"
    if text.startswith("-"):
        text = "menos " + text[1:]
    return text.replace(".", " coma ").replace("E", " por diez a la ")


# ============================================================================
# CLASE: VoiceFeedback
# Propósito: Síntesis de voz para feedback auditivo
# Responsabilidades:
#   - Describir acciones y resultados en español
#   - Ejecutar en hilo separado para no bloquear el bucle principal
#   - Cola acotada de mensajes para evitar solapamiento
# ============================================================================
class VoiceFeedback:
    """
    Feedback hablado con pyttsx3.

    Si el motor de voz no puede inicializarse (sin drivers de audio), la
    voz queda desactivada en la configuración y speak() no hace nada.
    """

    def __init__(self, config, engine_factory=None):
        """
        Args:
            config (AccessibilityConfig): Configuración de accesibilidad
            engine_factory (callable): Crea el motor TTS (pyttsx3.init por defecto)
        """
        self.config = config
        self.engine = None
        self.is_speaking = False
        self.message_queue = deque(maxlen=5)
        self._lock = threading.Lock()

        try:
            self.engine = (engine_factory or pyttsx3.init)()
            self._configure_engine()
            print("✓ Sistema de voz inicializado correctamente")
        except Exception as e:
            print(f"⚠ Advertencia: No se pudo inicializar el sistema de voz: {e}")
            self.engine = None
            self.config.voice_enabled = False

    def _configure_engine(self):
        """Aplica volumen y velocidad y elige una voz del idioma configurado."""
        self.engine.setProperty('volume', self.config.voice_volume)
        self.engine.setProperty('rate', self.config.voice_rate)

        language = self.config.voice_language.lower()
        for voice in self.engine.getProperty('voices') or []:
            languages = [str(lang).lower() for lang in (getattr(voice, 'languages', None) or [])]
            if language in voice.id.lower() or any(language in lang for lang in languages):
                self.engine.setProperty('voice', voice.id)
                print(f"✓ Voz seleccionada: {voice.name}")
                return
        print(f"⚠ No se encontró voz para '{language}'. Usando voz predeterminada.")

    def speak(self, text):
        """
        Encola un mensaje y arranca el hilo de síntesis si está parado.

        Si la cola está llena se descarta el mensaje más antiguo.
        """
        if not self.config.voice_enabled or not self.engine:
            return

        with self._lock:
            self.message_queue.append(text)
            if self.is_speaking:
                return
            self.is_speaking = True

        thread = threading.Thread(target=self._process_queue, daemon=True)
        thread.start()

    def _process_queue(self):
        while True:
            with self._lock:
                if not self.message_queue:
                    self.is_speaking = False
                    return
                message = self.message_queue.popleft()
            try:
                self.engine.say(message)
                self.engine.runAndWait()
            except Exception as e:
                print(f"⚠ Error al reproducir voz: {e}")

    def describe(self, action, display):
        """
        Frase que anuncia una acción ya aplicada.

        Args:
            action (Action): Acción aplicada
            display (str): Display resultante

        Returns:
            str | None: None si la acción no se anuncia
        """
        if action.kind == ActionKind.DIGIT:
            return NUMBER_WORDS.get(action.argument, action.argument)
        if display == ERROR_TEXT and action.kind != ActionKind.MEMORY_CLEAR:
            return "error de cálculo"
        if action.kind == ActionKind.OPERATOR:
            return OPERATION_WORDS.get(action.argument, action.argument)
        if action.kind in RESULT_ACTIONS:
            return f"igual a {spoken_number(display)}"
        return ACTION_WORDS.get(action.kind)

    def announce(self, action, display):
        message = self.describe(action, display)
        if message:
            self.speak(message)
