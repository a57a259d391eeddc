import re


NUMBER = re.compile(r"^-?\d+(\.\d*)?$")

KEYS = {
    "=": lambda calc: calc.calculate(),
    "%": lambda calc: calc.percent(),
    ".": lambda calc: calc.add_decimal(),
    "±": lambda calc: calc.toggle_sign(),
    "C": lambda calc: calc.clear_all(),
    "CE": lambda calc: calc.clear_entry(),
    "DEL": lambda calc: calc.backspace(),
    "M+": lambda calc: calc.memory_add(),
    "M-": lambda calc: calc.memory_subtract(),
    "MR": lambda calc: calc.memory_recall(),
    "MC": lambda calc: calc.memory_clear(),
}


def type_number(calc, text):
    """Teclea un número como lo haría el usuario; el signo se aplica al final."""
    negative = text.startswith("-")
    for char in text.lstrip("-"):
        if char == ".":
            calc.add_decimal()
        else:
            calc.add_digit(char)
    if negative:
        calc.toggle_sign()


def press_keys(calc, *tokens):
    """
    Ejecuta una secuencia de pulsaciones.

    Números ("12.5", "-3") se teclean dígito a dígito; "+ - * / ^" son
    operadores; el resto de teclas están en KEYS o son nombres de función.
    """
    for token in tokens:
        if NUMBER.match(token):
            type_number(calc, token)
        elif token in ("+", "-", "*", "/", "^"):
            calc.add_operation(token)
        elif token in KEYS:
            KEYS[token](calc)
        else:
            calc.apply_function(token)
    return calc.get_display()
