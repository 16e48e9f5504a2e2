"""
salonslots - bookable appointment slots for salon professionals.
"""

__version__ = "0.1.0"
