"""
Aplicación principal que integra todos los componentes.

Este módulo contiene la clase CalculatorApp: lee teclado, gestos y comandos
de voz, los convierte en acciones y las aplica en orden sobre un único
CalculatorEngine.
"""

import time

import cv2

from calculadora.config.settings import AccessibilityConfig
from calculadora.core.actions import Action, ActionKind, ActionQueue, digit, operator
from calculadora.core.calculator import CalculatorEngine
from calculadora.core.formatting import ERROR_TEXT
from calculadora.gestures.classifier import GESTURE_ACTIONS, GestureClassifier
from calculadora.ui.renderer import UIRenderer, blank_canvas
from calculadora.voice.commands import VoiceCommandMapper
from calculadora.voice.feedback import VoiceFeedback


KEY_ESC = 27
KEY_ENTER = 13
KEY_BACKSPACE = 8

KEY_ACTIONS = {ord(str(n)): digit(n) for n in range(10)}
KEY_ACTIONS.update({
    ord("+"): operator("+"),
    ord("-"): operator("-"),
    ord("*"): operator("*"),
    ord("/"): operator("/"),
    ord("^"): operator("^"),
    ord("="): Action(ActionKind.EQUALS),
    KEY_ENTER: Action(ActionKind.EQUALS),
    ord("."): Action(ActionKind.DECIMAL),
    ord(","): Action(ActionKind.DECIMAL),
    KEY_BACKSPACE: Action(ActionKind.DELETE),
    ord("c"): Action(ActionKind.CLEAR),
    ord("e"): Action(ActionKind.CLEAR_ENTRY),
    ord("%"): Action(ActionKind.PERCENT),
    ord("n"): Action(ActionKind.SIGN),
    ord("s"): Action(ActionKind.SIN),
    ord("o"): Action(ActionKind.COS),
    ord("t"): Action(ActionKind.TAN),
    ord("r"): Action(ActionKind.SQRT),
    ord("!"): Action(ActionKind.FACTORIAL),
    ord("m"): Action(ActionKind.MEMORY_ADD),
    ord("M"): Action(ActionKind.MEMORY_SUBTRACT),
    ord("k"): Action(ActionKind.MEMORY_RECALL),
    ord("l"): Action(ActionKind.MEMORY_CLEAR),
})

FEEDBACK_COLORS = {
    ActionKind.DIGIT: (100, 255, 100),
    ActionKind.OPERATOR: (255, 150, 0),
    ActionKind.EQUALS: (0, 255, 255),
    ActionKind.CLEAR: (255, 50, 50),
    ActionKind.DELETE: (255, 200, 0),
}


def feedback_text(action, display):
    """Texto corto que confirma una acción en pantalla."""
    if display == ERROR_TEXT:
        return "Error"
    if action.kind == ActionKind.DIGIT:
        return f"OK {action.argument}"
    if action.kind == ActionKind.OPERATOR:
        return f"{action.argument} OPERADOR"
    if action.kind == ActionKind.EQUALS:
        return f"= {display}"
    return action.kind.name.replace("_", " ")


# ============================================================================
class CalculatorApp:
    """
    Coordinador y bucle principal.

    Arquitectura:
        - CalculatorEngine: Estado y aritmética
        - ActionQueue: Serializa teclado, gestos y voz sobre el motor
        - GestureClassifier + HandTracker: Gestos (opcional, requiere cámara)
        - VoiceCommandMapper: Comandos de voz ya reconocidos
        - UIRenderer / VoiceFeedback: Salida visual y hablada

    Gestos:
        - Solo se aceptan con confianza >= gesture_confidence_threshold
        - Tras cada gesto aceptado hay un cooldown (~0.8s) y el buffer se vacía
    """

    def __init__(self, camera_index=0, config=None, calculator_config=None,
                 use_camera=True, voice=None, width=1280, height=720):
        """
        Args:
            camera_index (int): Índice de la cámara
            config (AccessibilityConfig): Configuración de accesibilidad
            calculator_config (CalculatorConfig): Configuración del motor
            use_camera (bool): False para usar solo teclado (y voz)
            voice (VoiceFeedback): Feedback hablado ya construido (opcional)
            width, height (int): Tamaño de la ventana sin cámara

        Raises:
            RuntimeError: Si se pidió cámara y no se puede abrir
        """
        self.config = config if config else AccessibilityConfig()
        self.calc = CalculatorEngine(calculator_config)
        self.actions = ActionQueue()
        self.voice = voice if voice else VoiceFeedback(self.config)
        self.voice_commands = VoiceCommandMapper(self.config, self.actions.put)

        self.cap = None
        self.tracker = None
        self.classifier = GestureClassifier(self.config)
        self.width, self.height = width, height

        if use_camera:
            self._open_camera(camera_index)

        self.ui = UIRenderer(self.width, self.height, self.config)

        self.last_gesture = "none"
        self.cooldown = 0

        self.fps_time = time.time()
        self.fps = 0

        if self.config.extended_gestures:
            print("✓ Modo Gestos Extendidos ACTIVADO (para movilidad reducida)")
        if self.config.voice_enabled:
            print("✓ Feedback por voz ACTIVADO")
        if self.calc.is_turbo_enabled:
            print("✓ Modo turbo ACTIVADO")

    def _open_camera(self, camera_index):
        from calculadora.gestures.tracker import HandTracker

        self.cap = cv2.VideoCapture(camera_index)
        if not self.cap.isOpened():
            raise RuntimeError(f"Error al abrir cámara {camera_index}")

        self.cap.set(cv2.CAP_PROP_FRAME_WIDTH, 1920)
        self.cap.set(cv2.CAP_PROP_FRAME_HEIGHT, 1080)
        self.cap.set(cv2.CAP_PROP_FPS, 30)
        self.cap.set(cv2.CAP_PROP_BUFFERSIZE, 1)

        self.width = int(self.cap.get(cv2.CAP_PROP_FRAME_WIDTH))
        self.height = int(self.cap.get(cv2.CAP_PROP_FRAME_HEIGHT))
        self.tracker = HandTracker()
        print(f"OK Camara: {self.width}x{self.height}")

    # ========================================================================
    # ENTRADAS
    # ========================================================================

    def process_gesture(self, gesture_id, confidence):
        """
        Encola la acción de un gesto estable.

        Returns:
            bool: True si el gesto produjo una acción

        Se ignora si hay cooldown activo, si es el mismo gesto que el
        anterior, si la confianza no llega al umbral o si no tiene acción.
        """
        if confidence < self.config.gesture_confidence_threshold:
            return False
        if self.cooldown > 0 or gesture_id == self.last_gesture:
            return False

        action = GESTURE_ACTIONS.get(gesture_id)
        if action is None:
            return False

        self.last_gesture = gesture_id
        self.actions.put(action)
        self.cooldown = self.config.get_cooldown()
        if action.kind == ActionKind.DELETE:
            self.cooldown //= 2
        self.classifier.reset_buffer()
        return True

    def handle_key(self, key):
        """
        Procesa una tecla de cv2.waitKey.

        Returns:
            bool: False si el usuario pidió salir (ESC o 'q')
        """
        if key == KEY_ESC or key == ord('q'):
            return False

        action = KEY_ACTIONS.get(key)
        if action is not None:
            self.actions.put(action)
        elif key == ord('v'):
            self.toggle_voice()
        elif key == ord('a'):
            self.toggle_extended_gestures()
        elif key == ord('x'):
            self.calc.set_turbo_mode(not self.calc.is_turbo_enabled)
            status = "ACTIVADO" if self.calc.is_turbo_enabled else "DESACTIVADO"
            print(f"Modo turbo: {status}")
        return True

    def on_speech_recognized(self, text, confidence):
        """Punto de entrada para el reconocedor de voz (cualquier hilo)."""
        return self.voice_commands.on_speech_recognized(text, confidence)

    def toggle_voice(self):
        if self.config.voice_enabled:
            self.voice.speak("voz desactivada")
        self.config.voice_enabled = not self.config.voice_enabled
        status = "ACTIVADA" if self.config.voice_enabled else "DESACTIVADA"
        print(f"🔊 Voz: {status}")
        self.ui.show_feedback(f"VOZ {status}", (0, 255, 255), 60)
        if self.config.voice_enabled:
            self.voice.speak("voz activada")

    def toggle_extended_gestures(self):
        self.config.extended_gestures = not self.config.extended_gestures
        status = "ACTIVADO" if self.config.extended_gestures else "DESACTIVADO"
        print(f"♿ Modo Accesibilidad: {status}")
        self.ui.show_feedback(f"ACCESIBILIDAD {status}", (255, 200, 0), 60)

    # ========================================================================
    # APLICACIÓN DE ACCIONES
    # ========================================================================

    def apply_pending_actions(self):
        """Único punto donde se llama al motor."""
        return self.actions.drain(self.calc, self._on_action_applied)

    def _on_action_applied(self, action, _result):
        display = self.calc.get_display()
        color = (255, 50, 50) if display == ERROR_TEXT else FEEDBACK_COLORS.get(action.kind, (0, 255, 255))
        self.ui.show_feedback(feedback_text(action, display), color)
        self.voice.announce(action, display)

    # ========================================================================
    # BUCLE PRINCIPAL
    # ========================================================================

    def step(self, frame):
        """Un frame: gestos, acciones pendientes y dibujado."""
        hands_data = []
        gesture_name, gesture_color, confidence = "Sin mano", (150, 150, 150), 0.0

        if self.tracker is not None:
            hands_data, results = self.tracker.get_landmarks(frame)
            frame = self.tracker.draw_hands(frame, results)
            gesture_id, gesture_name, confidence, gesture_color = \
                self.classifier.detect_gesture_stable(hands_data)
            self.process_gesture(gesture_id, confidence)
            # Repetir el mismo gesto exige retirar la mano
            if not hands_data:
                self.last_gesture = "none"

        if self.cooldown > 0:
            self.cooldown -= 1

        self.apply_pending_actions()

        self.ui.draw_display(frame, self.calc)
        self.ui.draw_memory(frame, self.calc)
        self.ui.draw_key_help(frame)
        self.ui.draw_feedback(frame)
        if self.tracker is not None:
            self.ui.draw_gesture(frame, gesture_name, gesture_color, confidence)
            self.ui.draw_cooldown(frame, self.cooldown, self.config.get_cooldown())
            self.ui.draw_positioning_guide(frame, hands_data)
        return frame

    def run(self):
        print("\n" + "=" * 70)
        print("CALCULADORA - TECLADO, GESTOS Y VOZ")
        print("=" * 70)
        if self.tracker is not None:
            print("\nNumeros: 0-5 dedos levantados, 6-9 mano abierta + dedos")
            print("Suma: pulgar + indice | Resta: 4 dedos horizontales")
            print("Multiplicar: X con indices | Dividir: V + V | Potencia: 2 pulgares")
            print("Calcular: pulgar arriba")
        print("\nPresiona ESC o 'q' para salir")
        print("'v' voz | 'a' accesibilidad | 'x' modo turbo\n")
        print("=" * 70 + "\n")

        while True:
            if self.cap is not None:
                ret, frame = self.cap.read()
                if not ret:
                    break
                frame = cv2.flip(frame, 1)
            else:
                frame = blank_canvas(self.width, self.height)

            frame = self.step(frame)

            current_time = time.time()
            self.fps = 1 / (current_time - self.fps_time + 1e-6)
            self.fps_time = current_time
            cv2.putText(frame, f"FPS: {int(self.fps)}", (self.width - 150, self.height - 30),
                        cv2.FONT_HERSHEY_SIMPLEX, 0.7, (0, 255, 0), 2)

            cv2.imshow('Calculadora', frame)
            key = cv2.waitKey(1) & 0xFF
            if key != 0xFF and not self.handle_key(key):
                break

        self.close()

    def close(self):
        if self.cap is not None:
            self.cap.release()
        if self.tracker is not None:
            self.tracker.close()
        cv2.destroyAllWindows()
        print("\nOK Aplicacion cerrada correctamente")
