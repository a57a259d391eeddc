"""
Módulo de entrada por gestos.

Exporta el clasificador, que no necesita cámara. HandTracker (MediaPipe)
se importa desde calculadora.gestures.tracker.
"""

from .classifier import GESTURE_ACTIONS, GestureClassifier

__all__ = ['GESTURE_ACTIONS', 'GestureClassifier']
