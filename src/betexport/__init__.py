"""Export Sportsbet transaction history to CSV."""

__version__ = "0.1.0"
