"""
Window Registry - Open state, placement and stacking order of the windows.

Every window that is opened or focused is assigned a z-index strictly above
all others, so exactly one window holds the maximum and it is always the one
the user touched last. Values only grow; when they approach Z_INDEX_CEILING
the registry renumbers every window by rank (only relative order matters).
"""
import logging
from typing import Callable, Dict, List, Optional, Tuple

from ..models import PanelState
from ..config import PANELS, PRIMARY_PANEL, Z_INDEX_CEILING

logger = logging.getLogger(__name__)


class WindowRegistry:
    """Holds a PanelState for each of a fixed set of named windows."""

    def __init__(self, panels: Optional[dict] = None, primary: str = PRIMARY_PANEL,
                 on_primary_closed: Optional[Callable[[], None]] = None,
                 z_ceiling: int = Z_INDEX_CEILING):
        """
        Args:
            panels: name -> {title, open, z_index, position, size}
            primary: Window whose closing emits the stop-playback effect
            on_primary_closed: Called when the primary window is closed
            z_ceiling: Renumber z-indexes before exceeding this value
        """
        panels = PANELS if panels is None else panels
        if primary not in panels:
            raise KeyError(primary)

        self.primary = primary
        self.on_primary_closed = on_primary_closed
        self.z_ceiling = z_ceiling
        self._panels: Dict[str, PanelState] = {
            name: PanelState(
                name=name,
                title=entry.get('title', name),
                is_open=bool(entry.get('open', False)),
                z_index=int(entry.get('z_index', 0)),
                position=tuple(entry.get('position', (50, 50))),
                size=tuple(entry.get('size', (320, 240))),
            )
            for name, entry in panels.items()
        }
        self._default_positions: Dict[str, Tuple[int, int]] = {
            name: panel.position for name, panel in self._panels.items()
        }

    def __getitem__(self, name: str) -> PanelState:
        return self._panels[name]

    def __contains__(self, name: str) -> bool:
        return name in self._panels

    @property
    def names(self) -> List[str]:
        return list(self._panels)

    def is_open(self, name: str) -> bool:
        return self._panels[name].is_open

    def z_index(self, name: str) -> int:
        return self._panels[name].z_index

    # ============================================
    # ACTIONS
    # ============================================

    def toggle(self, name: str) -> bool:
        """Open or close a window. Returns the new open state."""
        panel = self._panels[name]

        if panel.is_open:
            # z-index is irrelevant while closed, leave it alone
            panel.is_open = False
            logger.debug(f'Window closed: {name}')
            if name == self.primary and self.on_primary_closed:
                self.on_primary_closed()
            return False

        if not panel.dragged:
            # Dragged windows reopen where they were left
            panel.position = self._default_positions[name]
        panel.z_index = self._next_z(exclude=name)
        panel.is_open = True
        logger.debug(f'Window opened: {name} (z={panel.z_index})')
        return True

    def close(self, name: str) -> bool:
        """Close a window if it is open. Returns True if it was closed."""
        if not self._panels[name].is_open:
            return False
        self.toggle(name)
        return True

    def focus(self, name: str) -> bool:
        """Raise a window to the top. Returns False if it already was."""
        panel = self._panels[name]
        if self._holds_strict_max(name):
            return False
        panel.z_index = self._next_z()
        logger.debug(f'Window focused: {name} (z={panel.z_index})')
        return True

    def move(self, name: str, position: Tuple[int, int]):
        """Place a window's top-left corner (no clamping to the screen)."""
        panel = self._panels[name]
        panel.position = (int(position[0]), int(position[1]))
        panel.dragged = True

    # ============================================
    # QUERIES
    # ============================================

    def stacking_order(self) -> List[PanelState]:
        """Open windows, bottom to top."""
        return sorted((p for p in self._panels.values() if p.is_open), key=lambda p: p.z_index)

    def topmost(self) -> Optional[str]:
        """Name of the highest open window, or None if all are closed."""
        order = self.stacking_order()
        return order[-1].name if order else None

    def _holds_strict_max(self, name: str) -> bool:
        z = self._panels[name].z_index
        return all(other.z_index < z for other_name, other in self._panels.items() if other_name != name)

    def _next_z(self, exclude: Optional[str] = None) -> int:
        """One above the highest z-index (ignoring `exclude`)."""
        candidates = [p.z_index for n, p in self._panels.items() if n != exclude]
        highest = max(candidates, default=0)
        if highest + 1 > self.z_ceiling:
            self.renormalize()
            candidates = [p.z_index for n, p in self._panels.items() if n != exclude]
            highest = max(candidates, default=0)
        return highest + 1

    def renormalize(self):
        """Renumber z-indexes 1..n by current rank."""
        ranked = sorted(self._panels.values(), key=lambda p: p.z_index)
        for rank, panel in enumerate(ranked, start=1):
            panel.z_index = rank
        logger.info(f'Renumbered z-indexes for {len(ranked)} windows')
