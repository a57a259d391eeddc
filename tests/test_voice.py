from types import SimpleNamespace

import pytest

from calculadora.config import AccessibilityConfig
from calculadora.core.actions import Action, ActionKind, ActionQueue, digit, operator
from calculadora.voice.commands import VoiceCommandMapper, normalize_utterance
from calculadora.voice.feedback import VoiceFeedback, spoken_number


class FakeTTS:
    def __init__(self, voices=()):
        self.properties = {'voices': list(voices)}
        self.said = []

    def setProperty(self, name, value):
        self.properties[name] = value

    def getProperty(self, name):
        return self.properties.get(name)

    def say(self, text):
        self.said.append(text)

    def runAndWait(self):
        pass


def make_feedback(config=None, voices=()):
    tts = FakeTTS(voices)
    return VoiceFeedback(config or AccessibilityConfig(), engine_factory=lambda: tts), tts


class TestNormalize:

    @pytest.mark.parametrize("text, expected", [
        ("Más", "mas"),
        ("  RAÍZ ", "raiz"),
        ("por   ciento", "por ciento"),
        ("Atrás", "atras"),
    ])
    def test_normalize(self, text, expected):
        assert normalize_utterance(text) == expected


class TestVoiceCommandMapper:

    @pytest.fixture
    def mapper(self):
        return VoiceCommandMapper(AccessibilityConfig())

    @pytest.mark.parametrize("text, action", [
        ("cero", digit(0)),
        ("nueve", digit(9)),
        ("más", operator("+")),
        ("menos", operator("-")),
        ("por", operator("*")),
        ("dividido", operator("/")),
        ("elevado", operator("^")),
        ("igual", Action(ActionKind.EQUALS)),
        ("punto", Action(ActionKind.DECIMAL)),
        ("borrar", Action(ActionKind.CLEAR)),
        ("Borrar  entrada", Action(ActionKind.CLEAR_ENTRY)),
        ("atrás", Action(ActionKind.DELETE)),
        ("por ciento", Action(ActionKind.PERCENT)),
        ("Raíz", Action(ActionKind.SQRT)),
        ("memoria más", Action(ActionKind.MEMORY_ADD)),
        ("recuperar memoria", Action(ActionKind.MEMORY_RECALL)),
    ])
    def test_maps_commands(self, mapper, text, action):
        assert mapper.map(text, 0.9) == action

    def test_rejects_low_confidence(self, mapper):
        assert mapper.map("cinco", 0.64) is None
        assert mapper.map("cinco", 0.65) == digit(5)

    def test_unknown_utterance(self, mapper):
        assert mapper.map("hola", 1.0) is None

    def test_dispatches_into_queue(self, calc):
        queue = ActionQueue()
        mapper = VoiceCommandMapper(AccessibilityConfig(), queue.put)
        for word in ("siete", "por", "seis", "igual"):
            assert mapper.on_speech_recognized(word, 0.9)
        assert not mapper.on_speech_recognized("ocho", 0.1)
        queue.drain(calc)
        assert calc.get_display() == "42"


class TestSpokenNumber:

    @pytest.mark.parametrize("text, expected", [
        ("42", "42"),
        ("-2.5", "menos 2 coma 5"),
        ("Error", "error"),
    ])
    def test_spoken(self, text, expected):
        assert spoken_number(text) == expected


class TestVoiceFeedback:

    def test_selects_voice_for_language(self):
        voices = [
            SimpleNamespace(id="english", name="Alex", languages=["en_US"]),
            SimpleNamespace(id="spanish", name="Monica", languages=["es_ES"]),
        ]
        feedback, tts = make_feedback(voices=voices)
        assert tts.properties['voice'] == "spanish"
        assert tts.properties['volume'] == 0.8
        assert feedback.config.voice_enabled

    def test_init_failure_disables_voice(self):
        def broken():
            raise RuntimeError("sin audio")

        config = AccessibilityConfig()
        feedback = VoiceFeedback(config, engine_factory=broken)
        assert feedback.engine is None
        assert config.voice_enabled is False
        feedback.speak("nada")
        assert len(feedback.message_queue) == 0

    def test_process_queue_speaks_in_order(self):
        feedback, tts = make_feedback()
        feedback.message_queue.extend(["uno", "dos"])
        feedback.is_speaking = True
        feedback._process_queue()
        assert tts.said == ["uno", "dos"]
        assert feedback.is_speaking is False

    def test_speak_disabled(self):
        config = AccessibilityConfig()
        feedback, tts = make_feedback(config)
        config.voice_enabled = False
        feedback.speak("hola")
        assert len(feedback.message_queue) == 0

    @pytest.mark.parametrize("action, display, expected", [
        (digit(3), "3", "tres"),
        (operator("^"), "2", "elevado a"),
        (Action(ActionKind.EQUALS), "-2.5", "igual a menos 2 coma 5"),
        (Action(ActionKind.EQUALS), "Error", "error de cálculo"),
        (Action(ActionKind.SQRT), "3", "igual a 3"),
        (Action(ActionKind.CLEAR), "0", "todo borrado"),
        (Action(ActionKind.CLEAR_ENTRY), "0", "entrada borrada"),
        (Action(ActionKind.MEMORY_CLEAR), "Error", "memoria borrada"),
    ])
    def test_describe(self, action, display, expected):
        feedback, _ = make_feedback()
        assert feedback.describe(action, display) == expected
