from calculadora.config import AccessibilityConfig, CalculatorConfig, FormatConfig


class TestCalculatorConfig:

    def test_defaults(self):
        config = CalculatorConfig()
        assert config.max_display_length == 64
        assert config.decimal_separator == "."
        assert config.format.significant_digits == 12
        assert config.format.scientific_digits == 6
        assert config.memory_history_capacity == 1024
        assert config.max_factorial == 170
        assert config.turbo_mode is False

    def test_custom_format(self):
        config = CalculatorConfig(FormatConfig(decimal_separator=",", max_display_length=32))
        assert config.decimal_separator == ","
        assert config.max_display_length == 32


class TestAccessibilityConfig:

    def test_defaults(self):
        config = AccessibilityConfig()
        assert config.voice_confidence_threshold == 0.65
        assert config.gesture_confidence_threshold == 0.7
        assert config.get_cooldown() == 25

    def test_extended_mode(self):
        config = AccessibilityConfig()
        config.extended_gestures = True
        assert config.get_cooldown() == 40
        assert config.get_distance_threshold(100) == 150
