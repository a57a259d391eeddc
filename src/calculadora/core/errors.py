"""
Excepciones internas del motor de cálculo.

Ninguna sale de los métodos de acción de CalculatorEngine: todas se
convierten en el estado "Error" del display o en una acción ignorada.
"""


class CalculatorError(Exception):
    """Base de todos los errores del motor."""


class DivideByZeroError(CalculatorError):
    """División por un divisor nulo o subnormal."""


class NonFiniteResultError(CalculatorError):
    """Desbordamiento, NaN, infinito o argumento fuera de dominio."""


class InvalidOperatorError(CalculatorError):
    """Símbolo de operador fuera de + - * / ^."""


class MalformedDisplayError(CalculatorError):
    """El texto del display no representa un número finito."""


class InvalidDigitError(CalculatorError):
    """Entrada de dígito que no es un único carácter 0-9."""
