"""
Genium - WhatsApp query assistant for real estate brokers.
"""

__version__ = "1.0.0"
