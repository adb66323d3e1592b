"""Stocks domain - ticker lookups and TradingView symbol mapping"""
