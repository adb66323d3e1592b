"""Accounts domain - registration, sessions and account deletion"""
