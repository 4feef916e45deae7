"""Block Blast: grid block-placement puzzle engine."""

__version__ = "0.1.0"
