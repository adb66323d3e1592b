"""Watchlist domain - tracked ticker symbols per user"""
