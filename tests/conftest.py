import pytest

from calculadora.core.calculator import CalculatorEngine
from helpers import press_keys


@pytest.fixture
def calc():
    return CalculatorEngine()


@pytest.fixture
def press(calc):
    return lambda *tokens: press_keys(calc, *tokens)
