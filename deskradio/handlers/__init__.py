"""
DeskRadio Handlers - Pointer input for the windows.
"""
from .pointer import PointerCapture
from .drag import DraggablePanel, DragSession

__all__ = ['PointerCapture', 'DraggablePanel', 'DragSession']
