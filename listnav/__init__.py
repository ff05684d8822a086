"""
listnav - searchable dropdown and paginator widgets for Textual
"""

__version__ = "0.1.0"
