"""Version information for the fedisign Python SDK"""

__version__ = "0.1.0"
