"""
Configuración del motor de cálculo y de los adaptadores de entrada.

Este módulo agrupa en objetos explícitos todo lo que antes era estado global:
formato numérico, límites de la memoria y preferencias de accesibilidad
(voz, gestos, guías visuales).
"""


# ============================================================================
# CLASE: FormatConfig
# Propósito: Parámetros del formateo numérico del display
# ============================================================================
class FormatConfig:
    """
    Parámetros que recibe format_number() en lugar de una cultura global.

    Valores:
        - decimal_separator: Separador decimal mostrado en el display
        - max_display_length: Longitud máxima del texto del display
        - significant_digits: Dígitos significativos del formato general
        - scientific_digits: Decimales de la notación científica de respaldo
    """

    def __init__(self, decimal_separator=".", max_display_length=64,
                 significant_digits=12, scientific_digits=6):
        self.decimal_separator = decimal_separator
        self.max_display_length = max_display_length
        self.significant_digits = significant_digits
        self.scientific_digits = scientific_digits


# ============================================================================
# CLASE: CalculatorConfig
# Propósito: Configuración del motor de cálculo
# ============================================================================
class CalculatorConfig:
    """Límites del motor: formato, memoria, factorial y modo turbo."""

    def __init__(self, format_config=None):
        self.format = format_config if format_config else FormatConfig()

        # ====================================================================
        # MEMORIA
        # ====================================================================
        self.memory_history_capacity = 1024  # Entradas guardadas (las viejas se descartan)
        self.memory_history_preview = 50     # Entradas mostradas en el texto del historial

        # ====================================================================
        # LÍMITES NUMÉRICOS
        # ====================================================================
        self.max_factorial = 170             # 171! desborda un double
        self.turbo_mode = False              # Evaluación sin excepciones

    @property
    def max_display_length(self):
        return self.format.max_display_length

    @property
    def decimal_separator(self):
        return self.format.decimal_separator


# ============================================================================
# CLASE: AccessibilityConfig
# Propósito: Preferencias de voz, gestos y ayudas visuales
# ============================================================================
class AccessibilityConfig:
    """
    Configuración de accesibilidad para los adaptadores de entrada y salida.

    Opciones disponibles:
        - Feedback por voz configurable (volumen, velocidad, idioma)
        - Umbrales de confianza para comandos de voz y gestos
        - Modo gestos extendidos (gestos más lentos y amplios)
        - Ayudas visuales (guías de posicionamiento)
    """

    def __init__(self):
        # ====================================================================
        # CONFIGURACIÓN DE VOZ
        # ====================================================================
        self.voice_enabled = True           # Feedback hablado
        self.voice_volume = 0.8             # Volumen (0.0-1.0)
        self.voice_rate = 150               # Palabras por minuto
        self.voice_language = 'es'
        self.voice_confidence_threshold = 0.65  # Reconocimientos por debajo se descartan

        # ====================================================================
        # GESTOS
        # ====================================================================
        self.gesture_confidence_threshold = 0.7
        self.extended_gestures = False      # Modo para movilidad reducida
        self.gesture_cooldown = 25          # Frames entre acciones (~0.8s @ 30fps)
        self.extended_cooldown = 40
        self.distance_multiplier = 1.5      # Tolerancia de distancias en modo extendido

        # ====================================================================
        # AYUDAS VISUALES
        # ====================================================================
        self.show_hand_guides = True
        self.guide_opacity = 0.6

    def get_cooldown(self):
        """Retorna los frames de espera entre gestos según el modo activo."""
        return self.extended_cooldown if self.extended_gestures else self.gesture_cooldown

    def get_distance_threshold(self, base_distance):
        """
        Calcula el umbral de distancia según el modo.

        Args:
            base_distance (float): Distancia base en píxeles

        Returns:
            float: Distancia ajustada según multiplicador
        """
        return base_distance * (self.distance_multiplier if self.extended_gestures else 1.0)
