"""
Formateo y lectura de números del display.

format_number() es la única función que produce texto numérico para el
display; parse_display() es su inversa aproximada.
"""

import math
import sys

from calculadora.config.settings import FormatConfig
from calculadora.core.errors import MalformedDisplayError


ERROR_TEXT = "Error"
DEFAULT_FORMAT = FormatConfig()

# Por debajo del menor double normal el valor se muestra como cero
ZERO_THRESHOLD = sys.float_info.min


def is_finite(value):
    return not (math.isnan(value) or math.isinf(value))


def _scientific(value, config):
    # Exponente con al menos dos cifras y signo: "1.234568E+16", no "E+016"
    return f"{value:.{config.scientific_digits}E}"


def format_number(value, config=DEFAULT_FORMAT):
    """
    Convierte un número al texto que se muestra en el display.

    Args:
        value (float): Valor a mostrar
        config (FormatConfig): Separador, longitud máxima y precisión

    Returns:
        str: "Error" si el valor no es finito, "0" para cero, o el número
             con 12 dígitos significativos sin ceros finales

    Ejemplos:
        - 0.1 + 0.2 → "0.3"
        - 1e16 → "1E+16"
        - -0.0 → "0"
    """
    if not is_finite(value):
        return ERROR_TEXT
    if value == 0.0 or abs(value) < ZERO_THRESHOLD:
        return "0"

    limit = config.max_display_length
    text = f"{value:.{config.significant_digits}G}"

    if "E" in text:
        if len(text) > limit:
            text = _scientific(value, config)
    else:
        if "." in text:
            text = text.rstrip("0").rstrip(".")
        if text == "-0":
            text = "0"
        if len(text) > limit:
            text = _scientific(value, config)

    if not text:
        return "0"
    if config.decimal_separator != ".":
        text = text.replace(".", config.decimal_separator)
    return text


def parse_display(text, config=DEFAULT_FORMAT):
    """
    Lee el texto del display como número finito.

    Raises:
        MalformedDisplayError: Texto vacío, "Error", demasiado largo,
            no numérico o no finito ("inf", "nan")
    """
    if not text or text == ERROR_TEXT or len(text) > config.max_display_length:
        raise MalformedDisplayError(f"display no numérico: {text!r}")

    normalized = text
    if config.decimal_separator != ".":
        normalized = normalized.replace(config.decimal_separator, ".")
    # float() admite "1_000", "inf" y espacios; el display nunca los contiene
    if "_" in normalized or normalized.strip() != normalized:
        raise MalformedDisplayError(f"display no numérico: {text!r}")

    try:
        value = float(normalized)
    except ValueError as exc:
        raise MalformedDisplayError(f"display no numérico: {text!r}") from exc

    if not is_finite(value):
        raise MalformedDisplayError(f"display no finito: {text!r}")
    return value
