"""
boardai.interfaces - User interfaces

This package contains the terminal interface for playing the games and
inspecting the AI.
"""

# Don't import anything here to avoid circular imports
__all__ = []
