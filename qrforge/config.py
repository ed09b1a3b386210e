"""Configuration management."""

import os


# Encoding
DEFAULT_EC_LEVEL = os.getenv("QRFORGE_EC_LEVEL", "M")

# Rendering
DEFAULT_SIZE = int(os.getenv("QRFORGE_SIZE", "320"))
DEFAULT_BORDER = int(os.getenv("QRFORGE_BORDER", "0"))
DEFAULT_FG = os.getenv("QRFORGE_FG", "#000000")
DEFAULT_BG = os.getenv("QRFORGE_BG", "#ffffff")
