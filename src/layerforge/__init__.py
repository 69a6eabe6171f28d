"""
layerforge: layered content and schema resolution for game data editors.
"""

__version__ = "0.1.0"
