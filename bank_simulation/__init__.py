"""
Bank Simulation

A personal banking portfolio simulation: savings, checking and a term
deposit (CDT), with compound and simple interest projections. All financial
math uses Decimal.
"""

__version__ = "1.0.0"
