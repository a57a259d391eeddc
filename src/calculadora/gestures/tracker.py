"""
Seguimiento de manos con MediaPipe.

Convierte cada frame BGR de OpenCV en la lista de manos con landmarks en
píxeles que consume GestureClassifier.
"""

import cv2
import mediapipe as mp


# ============================================================================
# CLASE: HandTracker
# Propósito: Extraer y dibujar landmarks de hasta dos manos
# ============================================================================
class HandTracker:
    """
    Envoltorio de MediaPipe Hands en modo vídeo.

    Configuración:
        - max_num_hands=2: números 6-9 y operaciones usan dos manos
        - model_complexity=1: equilibrio entre precisión y rendimiento
    """

    def __init__(self, detection_confidence=0.8, tracking_confidence=0.8):
        self.mp_hands = mp.solutions.hands
        self.hands = self.mp_hands.Hands(
            static_image_mode=False,
            max_num_hands=2,
            min_detection_confidence=detection_confidence,
            min_tracking_confidence=tracking_confidence,
            model_complexity=1,
        )
        self.mp_draw = mp.solutions.drawing_utils
        self.mp_draw_styles = mp.solutions.drawing_styles

    def get_landmarks(self, img):
        """
        Args:
            img (np.array): Frame BGR de la cámara

        Returns:
            tuple: (hands_data, results)
                - hands_data: [{'landmarks': [{'x','y','z'} x21], 'label': 'Left'/'Right'}]
                - results: Resultado crudo de MediaPipe (para draw_hands)
        """
        img_rgb = cv2.cvtColor(img, cv2.COLOR_BGR2RGB)
        img_rgb.flags.writeable = False
        results = self.hands.process(img_rgb)

        hands_data = []
        if not (results.multi_hand_landmarks and results.multi_handedness):
            return hands_data, results

        h, w = img.shape[:2]
        for hand_landmarks, handedness in zip(results.multi_hand_landmarks,
                                              results.multi_handedness):
            hands_data.append({
                'landmarks': [
                    {'x': lm.x * w, 'y': lm.y * h, 'z': lm.z}
                    for lm in hand_landmarks.landmark
                ],
                'label': handedness.classification[0].label,
            })
        return hands_data, results

    def draw_hands(self, img, results):
        if results.multi_hand_landmarks:
            for hand_landmarks in results.multi_hand_landmarks:
                self.mp_draw.draw_landmarks(
                    img, hand_landmarks, self.mp_hands.HAND_CONNECTIONS,
                    self.mp_draw_styles.get_default_hand_landmarks_style(),
                    self.mp_draw_styles.get_default_hand_connections_style()
                )
        return img

    def close(self):
        self.hands.close()
