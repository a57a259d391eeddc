"""
Calculadora de escritorio con entrada por teclado, gestos y voz.

El motor (calculadora.core) no depende de la cámara ni del audio; los
adaptadores de entrada solo producen acciones para él.
"""

__version__ = "1.0.0"
