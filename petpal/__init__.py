"""
PetPal - budget-themed virtual pet simulation core.

A pet whose vital stats decay over time, a wallet that pays for its care,
weekly bills and salary, and a scoring engine that turns a whole session
into a single comparable score.
"""

__version__ = "1.0.0"
__author__ = "PetPal Team"
__description__ = "Virtual pet state-and-scoring engine"
