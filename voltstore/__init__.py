"""
VoltStore backend: solar kit recommendation engine and exchange-rate cache.
"""

__version__ = "0.1.0"
