from .dict_renderer import DictRenderer
from .html_renderer import HTMLRenderer
from .renderer import Renderer

__all__ = [
    Renderer.__name__,
    DictRenderer.__name__,
    HTMLRenderer.__name__,
]
