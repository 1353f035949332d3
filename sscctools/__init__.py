"""SSCC check digits, code generation, MySQL loading and a Wi-Fi network switcher."""

__version__ = "0.1.0"