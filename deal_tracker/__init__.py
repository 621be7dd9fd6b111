"""Deal Tracker - rastreamento de oportunidades de trading."""

__version__ = "1.0.0"
