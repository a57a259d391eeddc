"""
Acciones de usuario y su despacho al motor.

Los adaptadores de entrada (teclado, gestos, voz) solo producen objetos
Action; dispatch() los traduce a una llamada de CalculatorEngine mediante
una tabla fija.
"""

import threading
from collections import deque
from enum import Enum


class ActionKind(Enum):
    DIGIT = "digit"
    DECIMAL = "decimal"
    OPERATOR = "operator"
    EQUALS = "equals"
    SIGN = "sign"
    PERCENT = "percent"
    DELETE = "delete"
    CLEAR = "clear"
    CLEAR_ENTRY = "clear_entry"
    SIN = "sin"
    COS = "cos"
    TAN = "tan"
    SQRT = "sqrt"
    FACTORIAL = "factorial"
    MEMORY_ADD = "memory_add"
    MEMORY_SUBTRACT = "memory_subtract"
    MEMORY_RECALL = "memory_recall"
    MEMORY_CLEAR = "memory_clear"


class Action:
    """
    Acción discreta del usuario.

    Args:
        kind (ActionKind): Tipo de acción
        argument (str): Dígito para DIGIT, símbolo para OPERATOR; None en el resto
    """

    __slots__ = ("kind", "argument")

    def __init__(self, kind, argument=None):
        self.kind = kind
        self.argument = argument

    def __eq__(self, other):
        if not isinstance(other, Action):
            return NotImplemented
        return self.kind == other.kind and self.argument == other.argument

    def __hash__(self):
        return hash((self.kind, self.argument))

    def __repr__(self):
        if self.argument is None:
            return f"Action({self.kind.name})"
        return f"Action({self.kind.name}, {self.argument!r})"


_DISPATCH = {
    ActionKind.DIGIT: lambda engine, arg: engine.add_digit(arg),
    ActionKind.DECIMAL: lambda engine, arg: engine.add_decimal(),
    ActionKind.OPERATOR: lambda engine, arg: engine.add_operation(arg),
    ActionKind.EQUALS: lambda engine, arg: engine.calculate(),
    ActionKind.SIGN: lambda engine, arg: engine.toggle_sign(),
    ActionKind.PERCENT: lambda engine, arg: engine.percent(),
    ActionKind.DELETE: lambda engine, arg: engine.backspace(),
    ActionKind.CLEAR: lambda engine, arg: engine.clear_all(),
    ActionKind.CLEAR_ENTRY: lambda engine, arg: engine.clear_entry(),
    ActionKind.SIN: lambda engine, arg: engine.apply_function("sin"),
    ActionKind.COS: lambda engine, arg: engine.apply_function("cos"),
    ActionKind.TAN: lambda engine, arg: engine.apply_function("tan"),
    ActionKind.SQRT: lambda engine, arg: engine.apply_function("sqrt"),
    ActionKind.FACTORIAL: lambda engine, arg: engine.apply_function("factorial"),
    ActionKind.MEMORY_ADD: lambda engine, arg: engine.memory_add(),
    ActionKind.MEMORY_SUBTRACT: lambda engine, arg: engine.memory_subtract(),
    ActionKind.MEMORY_RECALL: lambda engine, arg: engine.memory_recall(),
    ActionKind.MEMORY_CLEAR: lambda engine, arg: engine.memory_clear(),
}


def dispatch(engine, action):
    """Ejecuta una acción sobre el motor y devuelve lo que retorne el método."""
    return _DISPATCH[action.kind](engine, action.argument)


def digit(d):
    return Action(ActionKind.DIGIT, str(d))


def operator(symbol):
    return Action(ActionKind.OPERATOR, symbol)


# ============================================================================
# CLASE: ActionQueue
# Propósito: Serializar acciones de varios productores sobre un único motor
# ============================================================================
class ActionQueue:
    """
    Cola FIFO segura entre hilos.

    Teclado, gestos y voz pueden producir acciones desde hilos distintos
    (el reconocedor de voz suele llamar desde su propio hilo). Solo el
    bucle principal consume con drain(), de modo que el motor nunca recibe
    llamadas concurrentes.

    Con maxlen, una cola llena rechaza la acción nueva; las ya encoladas
    nunca se descartan.
    """

    def __init__(self, maxlen=None):
        self.maxlen = maxlen
        self._items = deque()
        self._lock = threading.Lock()

    def put(self, action):
        """
        Returns:
            bool: False si la cola estaba llena y la acción se rechazó
        """
        with self._lock:
            if self.maxlen is not None and len(self._items) >= self.maxlen:
                print(f"⚠ Cola de acciones llena, se ignora {action!r}")
                return False
            self._items.append(action)
            return True

    def __len__(self):
        with self._lock:
            return len(self._items)

    def drain(self, engine, on_applied=None):
        """
        Aplica todas las acciones pendientes en orden de llegada.

        Args:
            engine (CalculatorEngine): Motor destino
            on_applied (callable): Recibe (action, resultado) tras cada acción

        Returns:
            int: Número de acciones aplicadas
        """
        with self._lock:
            batch = list(self._items)
            self._items.clear()

        for action in batch:
            result = dispatch(engine, action)
            if on_applied:
                on_applied(action, result)
        return len(batch)
