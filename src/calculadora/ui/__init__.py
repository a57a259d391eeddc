"""
Módulo de interfaz de usuario.
Contiene el renderizador OpenCV del display y la memoria.
"""

from .renderer import UIRenderer

__all__ = ['UIRenderer']
