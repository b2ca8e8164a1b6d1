"""
News Ticker Backend

A FastAPI backend for multi-dashboard news tickers.
Aggregates each dashboard's subscribed feeds and pushes live updates to viewers.
"""

__version__ = "1.0.0"
