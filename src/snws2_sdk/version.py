"""Version information for the SNWS2 Python SDK"""

__version__ = "0.1.0"
