"""safeguard: content safety classification and moderation workflow."""

__version__ = "0.1.0"
