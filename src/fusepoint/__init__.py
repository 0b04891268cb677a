"""
holds submodules related to refining split-read breakpoint calls
"""
__version__ = '0.1.0'
