"""
Календарь бронирования номеров отеля.
"""

__version__ = "0.1.0"
