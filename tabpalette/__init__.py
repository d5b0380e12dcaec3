"""
tabpalette - keyboard-driven quick switcher for markdown vaults
"""

__version__ = "0.3.0"
