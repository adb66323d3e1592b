"""Signalist notification backend"""
