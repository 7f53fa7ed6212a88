"""memkit: memory artifact builder and reflection reader."""

__version__ = "1.4.0"
