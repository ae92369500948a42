"""Live Fantasy Premier League mini-league scoring."""

__version__ = "0.1.0"
