from abc import ABC, abstractmethod
from typing import Any

from ..types import EventLoopType


class Renderer(ABC):
    """Abstract base class for renderers that materialize virtual nodes"""

    def preferred_event_loop_type(self) -> EventLoopType | None:
        """Event loop type that suits the target platform, if any"""
        return None

    @abstractmethod
    def create_element(self, type: str) -> Any:
        """Create an element for the given type."""

    @abstractmethod
    def create_text_element(self) -> Any:
        """Create an element for text."""

    @abstractmethod
    def insert(self, el: Any, parent: Any, anchor: Any = None):
        """
        Add element `el` as a child to the element `parent`.
        If an anchor is specified, it inserts `el` before the `anchor`
        element.
        """

    @abstractmethod
    def remove(self, el: Any, parent: Any):
        """Remove the element `el` from the children of element `parent`."""

    @abstractmethod
    def set_element_text(self, el: Any, value: str):
        """Set the text of the element."""

    @abstractmethod
    def set_attribute(self, el: Any, attr: str, value: Any):
        """Set the attribute `attr` of the element `el` to the value `value`."""

    @abstractmethod
    def remove_attribute(self, el: Any, attr: str, value: Any):
        """Remove the attribute `attr` from the element `el`."""

    @abstractmethod
    def add_event_listener(self, el: Any, event_type: str, value):
        """Add event listener for `event_type` to the element `el`."""

    @abstractmethod
    def remove_event_listener(self, el: Any, event_type: str, value):
        """Remove event listener for `event_type` from the element `el`."""
