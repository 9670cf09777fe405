"""
git-continuity: carry uncommitted git work between machines as one patch file
"""
__version__ = "1.0.0"
