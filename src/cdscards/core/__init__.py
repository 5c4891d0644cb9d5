"""Core package for cdscards.

Holds the configuration layer, the card/feedback contracts, the severity
ordering policy and the interaction mode gate shared by every handler.
"""
