from __future__ import annotations

from collections.abc import Callable
import logging
from typing import Any

from observ.proxy import Proxy
from observ.watcher import watch

from .hooks import ComponentInstance, create_component
from .renderers import DictRenderer, Renderer
from .runtime import Scheduler
from .types import EventLoopType
from .vdom import materialize

logger = logging.getLogger(__name__)


class Hooklet:
    def __init__(
        self,
        renderer,
        *,
        event_loop_type: EventLoopType = None,
        scheduler: Scheduler = None,
    ):
        if not isinstance(renderer, Renderer):
            raise TypeError(f"Expected a Renderer but got a {type(renderer)}")
        self.renderer = renderer
        if not event_loop_type:
            event_loop_type = (
                renderer.preferred_event_loop_type() or EventLoopType.ASYNC
            )
        self.event_loop_type = event_loop_type
        if scheduler is None:
            scheduler = Scheduler(event_loop_type)
        elif not isinstance(scheduler, Scheduler):
            raise TypeError(f"Expected a Scheduler but got a {type(scheduler)}")
        self.scheduler = scheduler

    def mount(
        self, component: Callable[[dict], Any], target: Any, props=None
    ) -> ComponentInstance:
        """
        target: DOM element/instance to render into.

        Every render of the returned instance removes the elements of the
        previous render from `target` and materializes the complete new tree.
        Effects run after the elements are inserted.
        """
        instance = create_component(component, props, scheduler=self.scheduler)
        renderer = self.renderer
        elements = []
        watchers = []

        def root_render():
            vnode = instance.render()
            for element in elements:
                renderer.remove(element, target)
            elements[:] = materialize(vnode, renderer, target)
            instance.mounted = True
            logger.debug("Committed %s into %r", instance, target)
            instance.schedule_effects()

        def root_unmount():
            watchers.clear()
            for element in elements:
                renderer.remove(element, target)
            elements.clear()

        instance.root_render = root_render
        instance.root_unmount = root_unmount

        if isinstance(instance.props, Proxy):
            watchers.append(
                watch(
                    lambda: instance.props,
                    lambda new: instance.update(),
                    sync=True,
                    deep=True,
                )
            )

        try:
            root_render()
        except Exception:
            instance.dispose()
            raise
        return instance

    def unmount(self, instance: ComponentInstance):
        """Run the cleanups of the instance and remove its elements."""
        instance.dispose()


def mount(
    component: Callable[[dict], Any],
    target: Any,
    props=None,
    *,
    renderer: Renderer = None,
    event_loop_type: EventLoopType = None,
) -> ComponentInstance:
    """Mount `component` into `target` using a DictRenderer, unless specified."""
    gui = Hooklet(renderer or DictRenderer(), event_loop_type=event_loop_type)
    return gui.mount(component, target, props)


def unmount(instance: ComponentInstance):
    instance.dispose()
