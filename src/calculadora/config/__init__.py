"""
Módulo de configuración de la calculadora.
Contiene el formato numérico, los límites del motor y la accesibilidad.
"""

from .settings import AccessibilityConfig, CalculatorConfig, FormatConfig

__all__ = ['AccessibilityConfig', 'CalculatorConfig', 'FormatConfig']
