"""
Módulo core con la lógica principal de la calculadora.
Contiene el motor de estados, el formateo numérico y el despacho de acciones.
"""

from .actions import Action, ActionKind, ActionQueue, dispatch
from .calculator import CalculatorEngine, evaluate
from .formatting import format_number, parse_display

__all__ = [
    'Action',
    'ActionKind',
    'ActionQueue',
    'CalculatorEngine',
    'dispatch',
    'evaluate',
    'format_number',
    'parse_display',
]
