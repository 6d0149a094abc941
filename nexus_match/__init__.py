"""
Nexus Match: trainer matching engine and job lifecycle core for L&D Nexus.
"""

__version__ = "0.1.0"
__app_name__ = "Nexus Match"
