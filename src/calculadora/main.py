"""
Punto de entrada de la calculadora.

Ejecución:
    calculadora                 # cámara 0, gestos + teclado + voz
    calculadora --no-camera     # solo teclado
    calculadora --extended --turbo
"""

import argparse
import traceback

from calculadora.app import CalculatorApp
from calculadora.config import AccessibilityConfig, CalculatorConfig


def build_parser():
    parser = argparse.ArgumentParser(prog="calculadora",
                                     description="Calculadora con teclado, gestos y voz")
    parser.add_argument("--camera", type=int, default=0, help="índice de la cámara")
    parser.add_argument("--no-camera", action="store_true", help="usar solo teclado")
    parser.add_argument("--no-voice", action="store_true", help="desactivar feedback hablado")
    parser.add_argument("--extended", action="store_true",
                        help="gestos extendidos para movilidad reducida")
    parser.add_argument("--turbo", action="store_true", help="evaluación sin excepciones")
    return parser


def build_configs(args):
    config = AccessibilityConfig()
    config.voice_enabled = not args.no_voice
    config.extended_gestures = args.extended

    calculator_config = CalculatorConfig()
    calculator_config.turbo_mode = args.turbo
    return config, calculator_config


def main(argv=None):
    args = build_parser().parse_args(argv)
    config, calculator_config = build_configs(args)
    try:
        app = CalculatorApp(camera_index=args.camera, config=config,
                            calculator_config=calculator_config,
                            use_camera=not args.no_camera)
        app.run()
    except KeyboardInterrupt:
        print("\nInterrumpido por el usuario")
    except Exception as e:
        print(f"\nError: {e}")
        traceback.print_exc()
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
