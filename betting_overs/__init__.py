"""Betting Overs — weekly group-betting tracker for over-2.5-goals picks."""

__version__ = "1.0.0"
