"""
Interfaz de usuario y renderizado con OpenCV.

Este módulo contiene la clase UIRenderer, que dibuja sobre el frame el
display del motor, la operación pendiente, la memoria y el feedback. El
texto del motor se muestra tal cual, sin reformatear.
"""

import time

import cv2
import numpy as np

from calculadora.config.settings import AccessibilityConfig
from calculadora.core.formatting import ERROR_TEXT


WHITE = (255, 255, 255)
GREEN = (100, 255, 100)
RED = (100, 100, 255)
GREY = (180, 180, 180)

KEY_HELP = [
    "0-9 . : numero",
    "+ - * / ^ : operador",
    "Enter o = : igual",
    "Retroceso : borrar",
    "c : borrar todo  e : borrar entrada",
    "% : porcentaje  n : signo",
    "s o t : sin cos tan",
    "r : raiz  ! : factorial",
    "m M : memoria + -",
    "k : recuperar  l : limpiar mem",
]


def blank_canvas(width, height):
    """Fondo negro para el modo sin cámara."""
    return np.zeros((height, width, 3), dtype=np.uint8)


def display_font_scale(text, max_width, base_scale=3.5, min_scale=0.8):
    """Reduce la fuente hasta que el texto quepa en max_width píxeles."""
    scale = base_scale
    while scale > min_scale:
        width = cv2.getTextSize(text, cv2.FONT_HERSHEY_DUPLEX, scale, 4)[0][0]
        if width <= max_width:
            break
        scale -= 0.25
    return max(scale, min_scale)


# ============================================================================
class UIRenderer:
    """
    Renderizador de la calculadora.

    Componentes visuales:
        1. Display principal con la operación pendiente encima
        2. Panel de memoria (total e historial)
        3. Indicador del gesto detectado con su confianza
        4. Feedback temporal de la última acción
        5. Barra de cooldown entre gestos
        6. Guía de teclado y guía de posicionamiento de manos
    """

    def __init__(self, width, height, config=None):
        self.width = width
        self.height = height
        self.config = config if config else AccessibilityConfig()
        self.feedback_msg = ""
        self.feedback_timer = 0
        self.feedback_color = (0, 255, 0)
        self.no_detection_counter = 0

    def show_feedback(self, msg, color=(0, 255, 0), duration=40):
        """Mensaje temporal; duration en frames (~40 = 1.3s @ 30fps)."""
        self.feedback_msg = msg
        self.feedback_color = color
        self.feedback_timer = duration

    @staticmethod
    def display_color(engine):
        """Rojo con "Error", verde tras un resultado, blanco al escribir."""
        if engine.get_display() == ERROR_TEXT:
            return RED
        if engine.should_reset_display and not engine.has_pending_operation:
            return GREEN
        return WHITE

    def _panel(self, img, x, y, w, h, fill, border, alpha=0.9, thickness=3):
        overlay = img.copy()
        cv2.rectangle(overlay, (x, y), (x + w, y + h), fill, -1)
        cv2.addWeighted(overlay, alpha, img, 1 - alpha, 0, img)
        cv2.rectangle(img, (x, y), (x + w, y + h), border, thickness)

    def draw_display(self, img, engine):
        x, y = 30, 30
        w, h = min(self.width - 60, 1100), 220
        self._panel(img, x, y, w, h, (35, 35, 35), (100, 200, 255), alpha=0.92, thickness=4)

        cv2.putText(img, "CALCULADORA", (x + 20, y + 40),
                    cv2.FONT_HERSHEY_DUPLEX, 1.1, (200, 200, 200), 2)

        expression = engine.get_expression()
        if expression:
            cv2.putText(img, expression, (x + 20, y + 85),
                        cv2.FONT_HERSHEY_SIMPLEX, 0.9, GREY, 2)

        display = engine.get_display()
        scale = display_font_scale(display, w - 60)
        cv2.putText(img, display, (x + 20, y + 170),
                    cv2.FONT_HERSHEY_DUPLEX, scale, self.display_color(engine), 4)

        # Cursor parpadeante mientras se escribe un número
        if not engine.should_reset_display and int(time.time() * 2) % 2 == 0:
            text_w = cv2.getTextSize(display, cv2.FONT_HERSHEY_DUPLEX, scale, 4)[0][0]
            cx = x + 30 + text_w
            cv2.line(img, (cx, y + 130), (cx, y + 175), (0, 255, 0), 4)

    def draw_memory(self, img, engine):
        x, y = 30, 270
        w = min(self.width - 60, 1100)
        lines = engine.memory_summary
        self._panel(img, x, y, w, 40 + 32 * len(lines), (30, 30, 30), (100, 100, 100))

        cy = y + 35
        for line in lines:
            # El historial puede ser largo; se muestra el final
            if len(line) > 70:
                line = "..." + line[-67:]
            cv2.putText(img, line, (x + 20, cy),
                        cv2.FONT_HERSHEY_SIMPLEX, 0.75, (220, 220, 220), 2)
            cy += 32

    def draw_gesture(self, img, name, color, conf):
        if name in ("Sin mano", "Detectando...", "Estabilizando...", "..."):
            return
        x, y, w, h = 50, 400, 600, 90
        overlay = img.copy()
        cv2.rectangle(overlay, (x, y), (x + w, y + h), color, -1)
        cv2.addWeighted(overlay, 0.75 * conf, img, 1 - 0.75 * conf, 0, img)
        cv2.rectangle(img, (x, y), (x + w, y + h), WHITE, 4)
        cv2.putText(img, name, (x + 20, y + 60),
                    cv2.FONT_HERSHEY_DUPLEX, 1.9, WHITE, 3)
        bar_w = int((w - 40) * conf)
        cv2.rectangle(img, (x + 20, y + h - 15), (x + 20 + bar_w, y + h - 5), WHITE, -1)

    def draw_key_help(self, img):
        x, y = self.width - 420, 30
        self._panel(img, x, y, 390, 50 + 30 * len(KEY_HELP), (25, 25, 25), (100, 100, 100))
        cv2.putText(img, "TECLADO", (x + 20, y + 35),
                    cv2.FONT_HERSHEY_DUPLEX, 0.9, (100, 200, 255), 2)
        cy = y + 70
        for label in KEY_HELP:
            cv2.putText(img, label, (x + 20, cy),
                        cv2.FONT_HERSHEY_SIMPLEX, 0.6, (200, 200, 200), 1)
            cy += 30

    def draw_feedback(self, img):
        if self.feedback_timer <= 0:
            return
        self.feedback_timer -= 1
        alpha = min(self.feedback_timer / 20.0, 1.0)

        x, y = self.width // 2 - 250, self.height - 120
        overlay = img.copy()
        cv2.rectangle(overlay, (x - 20, y - 50), (x + 520, y + 10), (40, 40, 40), -1)
        cv2.addWeighted(overlay, alpha * 0.88, img, 1 - alpha * 0.88, 0, img)

        color = tuple(int(c * alpha) for c in self.feedback_color)
        cv2.putText(img, self.feedback_msg, (x, y),
                    cv2.FONT_HERSHEY_DUPLEX, 1.4, color, 3)

    def draw_cooldown(self, img, cd, max_cd):
        if cd <= 0 or max_cd <= 0:
            return
        x, y = 50, 520
        w = int(300 * (cd / max_cd))
        cv2.rectangle(img, (x, y), (x + w, y + 18), (255, 200, 0), -1)
        cv2.putText(img, "Procesando...", (x, y - 10),
                    cv2.FONT_HERSHEY_SIMPLEX, 0.65, (255, 200, 0), 2)

    def draw_positioning_guide(self, img, hands_data):
        """Tras ~2s sin manos muestra dónde colocarlas."""
        if not self.config.show_hand_guides:
            return
        if hands_data:
            self.no_detection_counter = 0
            return
        self.no_detection_counter += 1
        if self.no_detection_counter <= 60:
            return

        cx, cy = self.width // 2, self.height // 2
        half_w, half_h = 200, 150
        overlay = img.copy()
        cv2.rectangle(overlay, (cx - half_w, cy - half_h), (cx + half_w, cy + half_h), (40, 40, 40), -1)
        opacity = self.config.guide_opacity
        cv2.addWeighted(overlay, opacity, img, 1 - opacity, 0, img)
        cv2.rectangle(img, (cx - half_w, cy - half_h), (cx + half_w, cy + half_h), (0, 200, 255), 3)

        palm = (cx, cy - 50)
        cv2.circle(img, palm, 50, (100, 200, 255), 3)
        for angle in np.radians(np.arange(-90, 31, 30)):
            end = (int(palm[0] + 50 * np.cos(angle)), int(palm[1] + 50 * np.sin(angle)))
            cv2.line(img, palm, end, (100, 200, 255), 3)

        cv2.putText(img, "COLOQUE SU MANO", (cx - 150, cy + 80),
                    cv2.FONT_HERSHEY_DUPLEX, 0.9, WHITE, 2)
        cv2.putText(img, "EN ESTA ZONA", (cx - 120, cy + 120),
                    cv2.FONT_HERSHEY_DUPLEX, 0.9, WHITE, 2)
