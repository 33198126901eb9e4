"""tokencalc -- build formulas from editable tokens and evaluate them."""

__version__ = "0.1.0"
