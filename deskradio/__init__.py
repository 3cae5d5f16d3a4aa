"""
DeskRadio - Draggable-window console for a live internet radio station.
"""
__version__ = '0.1.0'
