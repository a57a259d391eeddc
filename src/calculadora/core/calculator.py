"""
Motor de la calculadora: máquina de estados dirigida por acciones.

Este módulo contiene la clase CalculatorEngine, que convierte una secuencia
de acciones discretas (dígito, operador, igual, funciones, memoria, borrado)
en el texto del display, y la función evaluate() de operaciones binarias.
"""

import math
from collections import deque

from calculadora.config.settings import CalculatorConfig
from calculadora.core.errors import (
    CalculatorError,
    DivideByZeroError,
    InvalidDigitError,
    InvalidOperatorError,
    MalformedDisplayError,
    NonFiniteResultError,
)
from calculadora.core.formatting import (
    ERROR_TEXT,
    ZERO_THRESHOLD,
    format_number,
    is_finite,
    parse_display,
)


OPERATORS = ("+", "-", "*", "/", "^")
FUNCTIONS = ("sin", "cos", "tan", "sqrt", "factorial")

TAN_UNDEFINED_EPSILON = 1e-12
INTEGER_TOLERANCE = 1e-9
MAX_FACTORIAL = 170


def _build_factorial_table(limit):
    table = [1.0]
    for n in range(1, limit + 1):
        table.append(table[-1] * n)
    return table


FACTORIALS = _build_factorial_table(MAX_FACTORIAL)


def evaluate(left, right, op):
    """
    Evalúa una operación binaria en aritmética double.

    Args:
        left (float): Operando izquierdo
        right (float): Operando derecho
        op (str): Uno de "+", "-", "*", "/", "^"

    Returns:
        float: Resultado finito

    Raises:
        DivideByZeroError: Divisor nulo o subnormal
        NonFiniteResultError: Operandos o resultado no finitos, potencia fuera de dominio
        InvalidOperatorError: Operador desconocido
    """
    if not is_finite(left) or not is_finite(right):
        raise NonFiniteResultError("operandos no finitos")

    if op == "+":
        result = left + right
    elif op == "-":
        result = left - right
    elif op == "*":
        result = left * right
    elif op == "/":
        if abs(right) < ZERO_THRESHOLD:
            raise DivideByZeroError(f"{left} / {right}")
        result = left / right
    elif op == "^":
        try:
            result = math.pow(left, right)
        except (OverflowError, ValueError) as exc:
            raise NonFiniteResultError(f"{left} ^ {right}") from exc
    else:
        raise InvalidOperatorError(op)

    if not is_finite(result):
        raise NonFiniteResultError(f"{left} {op} {right}")
    return result


def evaluate_quiet(left, right, op):
    """Variante de evaluate() que devuelve NaN en lugar de lanzar."""
    try:
        return evaluate(left, right, op)
    except CalculatorError:
        return math.nan


# ============================================================================
# CLASE: CalculatorEngine
# Propósito: Estado y transiciones de la calculadora
# Responsabilidades:
#   - Construir el número del display dígito por dígito
#   - Evaluar de izquierda a derecha con un único operando pendiente
#   - Repetir la última operación al pulsar igual de nuevo
#   - Funciones unarias, porcentaje y memoria con historial
#   - Unificar todos los fallos en el estado "Error"
# ============================================================================
class CalculatorEngine:
    """
    Calculadora de bolsillo sin precedencia de operadores.

    Modelo de operación:
        1. Usuario ingresa dígitos → se acumulan en el display
        2. Usuario pulsa un operador → el display pasa a operando pendiente
        3. Si pulsa otro operador tras un nuevo número, la operación pendiente
           se evalúa en el acto ("2 + 3 *" muestra 5)
        4. Igual evalúa; pulsarlo de nuevo repite el último operador y operando

    Ningún método de acción lanza excepciones: los fallos dejan el display en
    "Error" y descartan la operación pendiente. El siguiente dígito o Clear
    empieza un cálculo nuevo.

    No es seguro para hilos; el llamador debe serializar las acciones.
    """

    def __init__(self, config=None):
        self.config = config if config else CalculatorConfig()
        self._format = self.config.format

        self.display = "0"
        self.pending_left_operand = None
        self.pending_operator = None
        self.should_reset_display = False
        self.last_operation_description = None
        self.last_operator = None
        self.last_right_operand = None

        self.memory_value = 0.0
        self.memory_history = deque(maxlen=self.config.memory_history_capacity)

        self.turbo_mode = self.config.turbo_mode

    # ========================================================================
    # LECTURA DE ESTADO
    # ========================================================================

    def get_display(self):
        return self.display

    def get_expression(self):
        """
        Operación pendiente para un display secundario (ej: "12 +").

        Returns:
            str: Vacío si no hay operador pendiente
        """
        if self.pending_operator is None:
            return ""
        return f"{self._fmt(self.pending_left_operand)} {self.pending_operator}"

    @property
    def has_pending_operation(self):
        return self.pending_operator is not None

    @property
    def is_turbo_enabled(self):
        return self.turbo_mode

    @property
    def memory_history_text(self):
        """
        Historial de memoria como texto: "+ 5+3=8; - 2".

        Solo se muestran las últimas entradas (memory_history_preview);
        si hay más se antepone "...; ".
        """
        if not self.memory_history:
            return ""
        preview = self.config.memory_history_preview
        entries = list(self.memory_history)[-preview:]
        text = "; ".join(
            f"{'+' if is_addition else '-'} {description}"
            for is_addition, description in entries
        )
        if len(self.memory_history) > preview:
            text = "...; " + text
        return text

    @property
    def memory_summary(self):
        """Líneas listas para la vista de memoria."""
        value = self._fmt(self.memory_value)
        if value == ERROR_TEXT:
            value = "0"
        history = self.memory_history_text
        if not history:
            return [f"Memoria: {value}"]
        return [f"Memoria total: {value}", f"Historial: {history}"]

    def set_turbo_mode(self, enabled):
        self.turbo_mode = bool(enabled)

    # ========================================================================
    # ENTRADA DE NÚMEROS
    # ========================================================================

    def add_digit(self, digit):
        """
        Añade un dígito al display.

        Args:
            digit (str | int): Dígito 0-9

        Returns:
            bool: True si el display cambió o empezó un número nuevo,
                  False si el dígito es inválido o se alcanzó el límite
        """
        try:
            digit = self._validate_digit(digit)
        except InvalidDigitError:
            return False

        accepted = True
        if self.should_reset_display or self.display in ("0", ERROR_TEXT):
            self.display = digit
        elif len(self.display) + 1 <= self.config.max_display_length:
            self.display += digit
        else:
            accepted = False

        self.should_reset_display = False
        self.last_operation_description = None
        return accepted

    def add_decimal(self):
        """
        Añade el separador decimal.

        Comportamiento:
            - Tras un resultado o error: empieza "0."
            - Si el número no tiene separador: lo añade al final
            - Si ya lo tiene o no cabe: no hace nada
        """
        separator = self.config.decimal_separator
        if self.should_reset_display or self.display == ERROR_TEXT:
            self.display = "0" + separator
            self.should_reset_display = False
            self.last_operation_description = None
            return

        if separator not in self.display and len(self.display) + 1 <= self.config.max_display_length:
            self.display += separator
            self.last_operation_description = None

    def backspace(self):
        """Borra el último carácter; tras un resultado o error vuelve a "0"."""
        if self.should_reset_display or self.display == ERROR_TEXT:
            self.display = "0"
            self.should_reset_display = False
        elif len(self.display) <= 1:
            self.display = "0"
        else:
            self.display = self.display[:-1]
            if self.display == "-":
                self.display = "0"
        self.last_operation_description = None

    def clear_all(self):
        """Reinicia el cálculo (C). La memoria se conserva."""
        self.display = "0"
        self.pending_left_operand = None
        self.pending_operator = None
        self.should_reset_display = False
        self.last_operation_description = None
        self.last_operator = None
        self.last_right_operand = None

    def clear_entry(self):
        """
        Borra solo el número en curso (CE).

        La operación pendiente, la memoria y el operando de repetición se
        conservan: "5 + 3 CE 4 =" da 9.
        """
        self.display = "0"
        self.should_reset_display = False
        self.last_operation_description = None

    def toggle_sign(self):
        try:
            value = self._read_display()
        except MalformedDisplayError:
            return
        self._set_display_value(-value)
        # Un exponente no admite más dígitos detrás
        if "E" in self.display:
            self.should_reset_display = True
        self.last_operation_description = None

    # ========================================================================
    # OPERACIONES BINARIAS
    # ========================================================================

    def add_operation(self, op):
        """
        Registra un operador binario.

        Args:
            op (str): "+", "-", "*", "/" o "^"

        Returns:
            bool: False si el operador o el display no son válidos

        Ejemplo de flujo:
            "2" → add_operation("+") → "3" → add_operation("*")
            display="5", operando pendiente 5, operador "*"
        """
        if op not in OPERATORS:
            return False
        try:
            current = self._read_display()
        except MalformedDisplayError:
            return False

        if self.pending_operator is not None and not self.should_reset_display:
            result = self._run(self.pending_left_operand, current, self.pending_operator)
            if result is None:
                return True
            self.pending_left_operand = result
        else:
            self.pending_left_operand = current

        self.pending_operator = op
        self.should_reset_display = True
        return True

    def calculate(self):
        """
        Evalúa la operación pendiente o repite la última (=).

        Returns:
            tuple: (éxito: bool, display: str)
                - (True, "8"): Cálculo correcto
                - (False, "Error"): Fallo en la evaluación
                - (False, display): No había nada que calcular
        """
        if self.pending_operator is not None:
            left, op = self.pending_left_operand, self.pending_operator
        elif self.last_operator is not None:
            left, op = None, self.last_operator
        else:
            return False, self.display

        try:
            current = self._read_display()
        except MalformedDisplayError:
            return False, self.display

        if left is None:
            # Repetir: el display es el nuevo operando izquierdo
            left, right = current, self.last_right_operand
        else:
            right = current
            self.last_operator, self.last_right_operand = op, right

        result = self._run(left, right, op)
        if result is None:
            return False, self.display

        self.pending_left_operand = None
        self.pending_operator = None
        self.should_reset_display = True
        return True, self.display

    def percent(self):
        """
        Porcentaje según contexto.

        Reglas:
            - Pendiente "+" o "-": porcentaje del operando izquierdo
              (200 + 10 % → 20)
            - Pendiente "*", "/" o "^": conversión simple (v / 100)
            - Sin operación pendiente: v / 100, registrado como "v%=r"
        """
        try:
            value = self._read_display()
        except MalformedDisplayError:
            return

        if self.pending_operator in ("+", "-"):
            result = self.pending_left_operand * value / 100.0
        else:
            result = value / 100.0

        if not is_finite(result):
            self._show_error()
            return

        self._set_display_value(result)
        if self.display == ERROR_TEXT:
            return
        self.should_reset_display = True
        if self.pending_operator is None:
            self._record(f"{self._fmt(value)}%", result)
        else:
            self.last_operation_description = None

    # ========================================================================
    # FUNCIONES UNARIAS
    # ========================================================================

    def apply_function(self, name):
        """
        Aplica una función al valor del display.

        Args:
            name (str): "sin", "cos", "tan" (en grados), "sqrt" o "factorial"

        Dominio:
            - tan: indefinida cuando cos(x) ≈ 0 (90°, 270°...)
            - sqrt: solo valores no negativos
            - factorial: enteros 0..170 (tabla precalculada)
        """
        if name not in FUNCTIONS:
            return
        try:
            value = self._read_display()
        except MalformedDisplayError:
            return

        try:
            result = self._compute_function(name, value)
        except CalculatorError:
            self._show_error()
            return

        self._set_display_value(result)
        if self.display == ERROR_TEXT:
            return
        self.should_reset_display = True
        self._record(f"{name}({self._fmt(value)})", result)

    def _compute_function(self, name, value):
        if name in ("sin", "cos", "tan"):
            radians = math.radians(value)
            if name == "tan" and abs(math.cos(radians)) < TAN_UNDEFINED_EPSILON:
                raise NonFiniteResultError("tangente indefinida")
            result = getattr(math, name)(radians)
        elif name == "sqrt":
            if value < 0:
                raise NonFiniteResultError("raíz de negativo")
            result = math.sqrt(value)
        else:
            result = self._factorial(value)

        if not is_finite(result):
            raise NonFiniteResultError(name)
        return result

    def _factorial(self, value):
        rounded = round(value)
        if abs(value - rounded) > INTEGER_TOLERANCE:
            raise NonFiniteResultError("factorial de no entero")
        if rounded < 0 or rounded > min(self.config.max_factorial, MAX_FACTORIAL):
            raise NonFiniteResultError(f"factorial fuera de rango: {rounded}")
        return FACTORIALS[int(rounded)]

    # ========================================================================
    # MEMORIA
    # ========================================================================

    def memory_add(self):
        self._update_memory(is_addition=True)

    def memory_subtract(self):
        self._update_memory(is_addition=False)

    def _update_memory(self, is_addition):
        try:
            value = self._read_display()
        except MalformedDisplayError:
            return

        new_value = self.memory_value + value if is_addition else self.memory_value - value
        if not is_finite(new_value):
            self.memory_clear()
            self._show_error()
            return

        description = self.last_operation_description or self._fmt(value)
        if description == ERROR_TEXT:
            description = "0"
        self.memory_value = new_value
        self.memory_history.append((is_addition, description))
        self.should_reset_display = True

    def memory_recall(self):
        formatted = self._fmt(self.memory_value)
        if formatted == ERROR_TEXT:
            self.memory_clear()
        else:
            self.display = formatted
        self.should_reset_display = True
        self.last_operation_description = None

    def memory_clear(self):
        self.memory_value = 0.0
        self.memory_history.clear()

    # ========================================================================
    # AUXILIARES
    # ========================================================================

    def _fmt(self, value):
        return format_number(value, self._format)

    def _read_display(self):
        return parse_display(self.display, self._format)

    @staticmethod
    def _validate_digit(digit):
        text = str(digit)
        if len(text) != 1 or text not in "0123456789":
            raise InvalidDigitError(text)
        return text

    def _run(self, left, right, op):
        """
        Evalúa y publica el resultado; None si terminó en error.

        En modo turbo la evaluación devuelve NaN en lugar de lanzar, y el
        NaN acaba en el mismo _show_error().
        """
        if self.turbo_mode:
            result = evaluate_quiet(left, right, op)
        else:
            try:
                result = evaluate(left, right, op)
            except CalculatorError:
                result = math.nan

        if not is_finite(result):
            self._show_error()
            return None

        self._set_display_value(result)
        if self.display == ERROR_TEXT:
            return None
        self._record(f"{self._fmt(left)}{op}{self._fmt(right)}", result)
        return result

    def _set_display_value(self, value):
        formatted = self._fmt(value)
        if formatted == ERROR_TEXT:
            self._show_error()
            return
        self.display = formatted

    def _record(self, description, result):
        formatted = self._fmt(result)
        if formatted == ERROR_TEXT:
            self.last_operation_description = None
        else:
            self.last_operation_description = f"{description}={formatted}"

    def _show_error(self):
        self.display = ERROR_TEXT
        self.pending_left_operand = None
        self.pending_operator = None
        self.should_reset_display = True
        self.last_operation_description = None
