"""Layer Manager for CAD"""
import logging
from typing import Dict, List, Optional
from dataclasses import dataclass

from .settings import DEFAULT_LAYER

logger = logging.getLogger(__name__)


@dataclass
class Layer:
    """Represents a CAD layer"""
    name: str
    visible: bool = True
    locked: bool = False
    color: int = 7
    line_type: str = "CONTINUOUS"


class LayerManager:
    """Manages CAD layers"""

    def __init__(self):
        self.layers: Dict[str, Layer] = {}
        self.current_layer = DEFAULT_LAYER
        # Create default layer
        self.add_layer(DEFAULT_LAYER, color=7)

    def add_layer(self, name: str, visible: bool = True, color: int = 7,
                  line_type: str = "CONTINUOUS", locked: bool = False) -> bool:
        """Add a new layer"""
        if name in self.layers:
            return False

        self.layers[name] = Layer(
            name=name,
            visible=visible,
            locked=locked,
            color=color,
            line_type=line_type
        )
        logger.debug(f"Layer '{name}' added")
        return True

    def remove_layer(self, name: str) -> bool:
        """Remove a layer (cannot remove layer 0 or current layer)"""
        if name == DEFAULT_LAYER or name == self.current_layer:
            return False

        if name in self.layers:
            del self.layers[name]
            return True
        return False

    def set_layer_visible(self, name: str, visible: bool) -> bool:
        """Set layer visibility"""
        if name in self.layers:
            self.layers[name].visible = visible
            return True
        return False

    def set_layer_locked(self, name: str, locked: bool) -> bool:
        """Set layer locked state"""
        if name in self.layers:
            self.layers[name].locked = locked
            logger.info(f"Layer '{name}' {'locked' if locked else 'unlocked'}")
            return True
        return False

    def set_current_layer(self, name: str) -> bool:
        """Set current drawing layer (locked layers cannot be current)"""
        if name in self.layers and not self.layers[name].locked:
            self.current_layer = name
            return True
        return False

    def get_current_layer(self) -> str:
        """Get current layer name"""
        return self.current_layer

    def get_layer(self, name: str) -> Optional[Layer]:
        """Get layer by name"""
        return self.layers.get(name)

    def get_all_layers(self) -> List[str]:
        """Get list of all layer names"""
        return list(self.layers.keys())

    def is_layer_visible(self, name: str) -> bool:
        """Check if layer is visible (unknown layers are shown)"""
        if name in self.layers:
            return self.layers[name].visible
        return True

    def is_layer_locked(self, name: str) -> bool:
        """Check if layer is locked"""
        if name in self.layers:
            return self.layers[name].locked
        return False
