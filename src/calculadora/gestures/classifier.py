"""
Clasificación de gestos de mano a partir de landmarks.

Este módulo no depende de la cámara: recibe los 21 landmarks por mano (en
píxeles) que produce HandTracker y devuelve el gesto reconocido, con un
buffer temporal que exige estabilidad antes de confirmarlo.
"""

import math
from collections import deque

import numpy as np

from calculadora.core.actions import Action, ActionKind, digit, operator


# Índices de landmarks de MediaPipe Hands
WRIST = 0
TIP_IDS = (4, 8, 12, 16, 20)
PIP_IDS = (3, 6, 10, 14, 18)
MCP_IDS = (2, 5, 9, 13, 17)

NO_GESTURE = ("none", "Sin mano", 0.0, (150, 150, 150))
UNKNOWN_GESTURE = ("unknown", "...", 0.2, (150, 150, 150))

DIGIT_COLOR = (100, 255, 100)

# Patrón exacto de dedos de una mano [pulgar, índice, medio, anular, meñique]
ONE_HAND_PATTERNS = {
    (0, 1, 0, 0, 0): ("num_1", "UNO (1)", 1.0, DIGIT_COLOR),
    (0, 1, 1, 0, 0): ("num_2", "DOS (2)", 1.0, DIGIT_COLOR),
    (1, 1, 0, 0, 0): ("add", "+ SUMA", 0.98, (0, 255, 0)),
    (0, 0, 0, 0, 1): ("clear_all", "BORRAR TODO", 0.95, (255, 50, 50)),
    (1, 0, 0, 0, 1): ("backspace", "<- BORRAR", 0.95, (255, 200, 0)),
    (0, 1, 0, 0, 1): ("decimal", ". PUNTO", 0.95, (200, 200, 255)),
}

GESTURE_ACTIONS = {f"num_{n}": digit(n) for n in range(10)}
GESTURE_ACTIONS.update({
    "add": operator("+"),
    "subtract": operator("-"),
    "multiply": operator("*"),
    "divide": operator("/"),
    "power": operator("^"),
    "equal": Action(ActionKind.EQUALS),
    "decimal": Action(ActionKind.DECIMAL),
    "clear_all": Action(ActionKind.CLEAR),
    "backspace": Action(ActionKind.DELETE),
})


def _point(landmark):
    return np.array([landmark['x'], landmark['y']], dtype=float)


def _distance(a, b):
    return float(np.linalg.norm(_point(a) - _point(b)))


def _unit(base, tip):
    vector = _point(tip) - _point(base)
    return vector / (np.linalg.norm(vector) + 1e-6)


def _angle_between(u, v):
    cos_angle = float(np.clip(np.dot(u, v), -1.0, 1.0))
    return math.degrees(math.acos(cos_angle))


# ============================================================================
# CLASE: GestureClassifier
# Propósito: Reconocer gestos de una o dos manos y estabilizarlos en el tiempo
# ============================================================================
class GestureClassifier:
    """
    Clasificador de gestos con buffer de estabilidad.

    Gestos de una mano:
        - 0-5: número de dedos levantados (4 con la mano vertical)
        - Resta: 4 dedos con la mano horizontal
        - Suma: pulgar + índice (L)
        - Igual: pulgar arriba
        - Punto: índice + meñique
        - Borrar: pulgar + meñique; Borrar todo: solo meñique

    Gestos de dos manos:
        - 6-9: mano abierta + 1-4 dedos en la otra
        - Multiplicar: índices cruzados en X
        - Dividir: V con ambas manos
        - Potencia: pulgar arriba con ambas manos
        - Borrar todo: ambas palmas abiertas
    """

    def __init__(self, config=None, buffer_size=10, min_stability=0.70):
        """
        Args:
            config (AccessibilityConfig): Ajusta distancias en modo extendido
            buffer_size (int): Frames de la ventana de estabilización
            min_stability (float): Fracción mínima de frames con el mismo gesto
        """
        self.config = config
        self.gesture_buffer = deque(maxlen=buffer_size)
        self.min_stability = min_stability
        self.min_frames = max(1, int(buffer_size * 0.8))

    def _scaled(self, base_distance):
        if self.config is None:
            return base_distance
        return self.config.get_distance_threshold(base_distance)

    # ========================================================================
    # DEDOS
    # ========================================================================

    def count_extended_fingers(self, landmarks):
        """
        Estado de cada dedo: [pulgar, índice, medio, anular, meñique].

        El pulgar cuenta como extendido si su punta está un 15% más lejos
        de la muñeca que la articulación IP. Los demás dedos votan con tres
        criterios (vertical, distancia a la muñeca, ángulo MCP-PIP-TIP) y se
        consideran extendidos con 2 de 3.
        """
        if len(landmarks) < 21:
            return [0, 0, 0, 0, 0]

        wrist = landmarks[WRIST]
        thumb_extended = _distance(landmarks[4], wrist) > _distance(landmarks[3], wrist) * 1.15
        fingers = [1 if thumb_extended else 0]

        for tip_id, pip_id, mcp_id in zip(TIP_IDS[1:], PIP_IDS[1:], MCP_IDS[1:]):
            tip, pip, mcp = landmarks[tip_id], landmarks[pip_id], landmarks[mcp_id]
            votes = (
                tip['y'] < pip['y'] - 20 and pip['y'] < mcp['y'],
                _distance(tip, wrist) > _distance(mcp, wrist) * 1.25,
                self.finger_angle(mcp, pip, tip) > 140,
            )
            fingers.append(1 if sum(votes) >= 2 else 0)

        return fingers

    @staticmethod
    def finger_angle(mcp, pip, tip):
        """Ángulo de extensión en grados: 180 recto, valores bajos doblado."""
        return 180.0 - _angle_between(_unit(mcp, pip), _unit(pip, tip))

    @staticmethod
    def is_hand_horizontal(landmarks):
        """Mano tumbada: extensión horizontal 1.8x la vertical y puntas niveladas."""
        if len(landmarks) < 21:
            return False
        wrist, middle_tip = landmarks[WRIST], landmarks[12]
        tips_level = abs(landmarks[8]['y'] - landmarks[20]['y']) < 50
        dx = abs(middle_tip['x'] - wrist['x'])
        dy = abs(middle_tip['y'] - wrist['y'])
        return dx > dy * 1.8 and tips_level

    def hands_form_x(self, landmarks_1, landmarks_2):
        """
        Índices cruzados en X.

        Requiere ángulo entre 40° y 140°, puntas cercanas, bases separadas
        y ambas puntas cerca del punto medio entre las bases.
        """
        if len(landmarks_1) < 21 or len(landmarks_2) < 21:
            return False

        base_1, tip_1 = landmarks_1[5], landmarks_1[8]
        base_2, tip_2 = landmarks_2[5], landmarks_2[8]

        angle = _angle_between(_unit(base_1, tip_1), _unit(base_2, tip_2))
        base_distance = _distance(base_1, base_2)
        center = (_point(base_1) + _point(base_2)) / 2
        near_center = all(
            np.linalg.norm(_point(tip) - center) < base_distance * 0.8
            for tip in (tip_1, tip_2)
        )
        return (40 < angle < 140
                and _distance(tip_1, tip_2) < self._scaled(200)
                and base_distance > 100
                and near_center)

    # ========================================================================
    # DETECCIÓN
    # ========================================================================

    def detect_gesture_raw(self, hands_data):
        """
        Gesto del frame actual sin estabilizar.

        Args:
            hands_data (list): [{'landmarks': [...], 'label': 'Left'|'Right'}]

        Returns:
            tuple: (gesto_id, nombre, confianza, color)
        """
        if not hands_data:
            return NO_GESTURE
        if len(hands_data) == 1:
            return self._one_hand(hands_data[0]['landmarks'])
        return self._two_hands(hands_data[0]['landmarks'], hands_data[1]['landmarks'])

    def _one_hand(self, landmarks):
        fingers = self.count_extended_fingers(landmarks)
        total = sum(fingers)

        if total == 0:
            return ("num_0", "CERO (0)", 1.0, (255, 100, 100))
        if total == 5:
            return ("num_5", "CINCO (5)", 1.0, DIGIT_COLOR)
        if fingers == [0, 1, 1, 1, 1]:
            if self.is_hand_horizontal(landmarks):
                return ("subtract", "- RESTA", 0.98, (255, 150, 0))
            return ("num_4", "CUATRO (4)", 1.0, DIGIT_COLOR)
        if total == 3:
            return ("num_3", "TRES (3)", 1.0, DIGIT_COLOR)
        if fingers == [1, 0, 0, 0, 0] and self._thumb_up(landmarks):
            return ("equal", "= CALCULAR", 1.0, (0, 255, 255))

        return ONE_HAND_PATTERNS.get(tuple(fingers), UNKNOWN_GESTURE)

    def _two_hands(self, landmarks_0, landmarks_1):
        fingers_0 = self.count_extended_fingers(landmarks_0)
        fingers_1 = self.count_extended_fingers(landmarks_1)
        total_0, total_1 = sum(fingers_0), sum(fingers_1)

        if total_0 == 5 and total_1 == 5:
            return ("clear_all", "BORRAR TODO", 0.9, (255, 50, 50))

        # Mano abierta + dedos extra en la otra: 6-9
        extra = total_1 if total_0 == 5 else total_0 if total_1 == 5 else 0
        if 1 <= extra <= 4:
            names = {6: "SEIS", 7: "SIETE", 8: "OCHO", 9: "NUEVE"}
            value = 5 + extra
            return (f"num_{value}", f"{names[value]} ({value})", 0.95, DIGIT_COLOR)

        if self.hands_form_x(landmarks_0, landmarks_1):
            return ("multiply", "MULTIPLICAR (x)", 0.95, (255, 100, 255))
        if fingers_0 == [0, 1, 1, 0, 0] and fingers_1 == [0, 1, 1, 0, 0]:
            return ("divide", "DIVIDIR (/)", 0.95, (150, 100, 255))
        if (fingers_0 == [1, 0, 0, 0, 0] and fingers_1 == [1, 0, 0, 0, 0]
                and self._thumb_up(landmarks_0) and self._thumb_up(landmarks_1)):
            return ("power", "POTENCIA (^)", 0.95, (255, 255, 100))

        # Solo una mano con dedos levantados: se interpreta sola
        if total_0 > 0 and total_1 == 0:
            return self._one_hand(landmarks_0)
        if total_1 > 0 and total_0 == 0:
            return self._one_hand(landmarks_1)
        return UNKNOWN_GESTURE

    def _thumb_up(self, landmarks):
        return landmarks[4]['y'] < landmarks[WRIST]['y'] - self._scaled(30)

    def detect_gesture_stable(self, hands_data):
        """
        Gesto confirmado por el buffer temporal.

        El gesto del frame se añade al buffer; solo se devuelve si el más
        frecuente ocupa al menos min_stability del buffer, con la confianza
        multiplicada por esa estabilidad.
        """
        gesture = self.detect_gesture_raw(hands_data)
        self.gesture_buffer.append(gesture[0])

        if len(self.gesture_buffer) < self.min_frames:
            return ("none", "Detectando...", 0.0, (150, 150, 150))

        counts = {}
        for gesture_id in self.gesture_buffer:
            counts[gesture_id] = counts.get(gesture_id, 0) + 1
        most_common = max(counts, key=counts.get)
        stability = counts[most_common] / len(self.gesture_buffer)

        if (stability >= self.min_stability
                and most_common not in ("none", "unknown")
                and most_common == gesture[0]):
            gesture_id, name, confidence, color = gesture
            return (gesture_id, name, confidence * stability, color)

        return ("none", "Estabilizando...", 0.0, (150, 150, 150))

    def reset_buffer(self):
        """Vacía el buffer tras procesar un gesto para no repetirlo."""
        self.gesture_buffer.clear()
