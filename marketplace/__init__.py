"""Marketplace collection engine.

Seller-owned product collections: manual lists and rule-driven smart
collections resolved against the live catalog.
"""
