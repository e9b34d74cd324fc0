"""
Call-order indexed hooks.

A component is a plain function that takes props and returns a tree of
VNodes. While it renders, the instance that renders it is 'current' and the
hook functions in this module read and write that instance's hook slots.
Slots are identified purely by their position: the Nth hook call of a render
maps onto the Nth slot. Components must therefore call their hooks in the
same order on every render, unconditionally.
"""
from __future__ import annotations

from collections.abc import Callable, Sequence
from contextvars import ContextVar
import logging
import sys
from typing import Any

from .runtime import scheduler as default_scheduler

logger = logging.getLogger(__name__)


# Adjust this setting to disable some runtime checks
# Defaults to True, except when it is part of an installed application
RUNTIME_WARNINGS = not getattr(sys, "frozen", False)

# Maximum number of consecutive render passes caused by state changes
# during the render itself
MAX_RENDER_PASSES = 50

_current_instance: ContextVar[ComponentInstance | None] = ContextVar(
    "current_instance", default=None
)

# Types for which 'strict equality' means equal values instead of identity
_VALUE_TYPES = (bool, int, float, complex, str, bytes, type(None))


class InvalidHookContextError(RuntimeError):
    """Raised when a hook is called while no component is rendering."""


class HookOrderError(RuntimeError):
    """Raised when the hook at some position changed kind between renders."""


class TooManyRendersError(RuntimeError):
    """Raised when a component keeps changing its own state while rendering."""


class State:
    __slots__ = ("value", "setter")

    def __init__(self, value):
        self.value = value
        self.setter = None


class Effect:
    __slots__ = ("deps", "cleanup")

    def __init__(self):
        self.deps: tuple | None = None
        self.cleanup: Callable[[], Any] | None = None


def is_same(a, b) -> bool:
    """
    Strict equality: values of the same primitive type compare by value,
    everything else by identity.
    """
    if a is b:
        return True
    return type(a) is type(b) and type(a) in _VALUE_TYPES and a == b


def deps_changed(old: tuple | None, new: tuple | None) -> bool:
    if old is None or new is None:
        return True
    if len(old) != len(new):
        return True
    return any(not is_same(a, b) for a, b in zip(old, new))


class ComponentInstance:
    """
    A component function together with its hook slots.

    `root_render` and `root_unmount` are only set for instances that are
    mounted by the driver. Without a root render, an update re-renders the
    instance and keeps the new tree in `vnode`, but nothing commits it.
    """

    def __init__(self, component_fn, props=None, scheduler=None):
        self.component_fn = component_fn
        self.props = {} if props is None else props
        self.hooks: list[State | Effect] = []
        self.vnode = None
        self.mounted = False
        self.disposed = False
        self.root_render: Callable[[], None] | None = None
        self.root_unmount: Callable[[], None] | None = None
        self.scheduler = scheduler or default_scheduler
        self.hook_index = 0
        # Effects that are due, by hook index
        self.pending_effects: dict[int, Callable] = {}
        self._rendering = False
        self._dirty = False

    def __repr__(self):
        name = getattr(self.component_fn, "__name__", repr(self.component_fn))
        return f"<{type(self).__name__}({name})>"

    def next_slot(self, kind, factory):
        index = self.hook_index
        self.hook_index += 1
        if index < len(self.hooks):
            slot = self.hooks[index]
            if RUNTIME_WARNINGS and not isinstance(slot, kind):
                raise HookOrderError(
                    f"Hook {index} of {self} was a {type(slot).__name__} hook "
                    f"in the previous render, but is now a {kind.__name__} hook. "
                    "Hooks must be called in the same order on every render."
                )
            return slot, index

        slot = factory()
        self.hooks.append(slot)
        return slot, index

    def render(self):
        """
        Invoke the component function with this instance as current instance
        and return the produced tree. State changes made by the component
        function itself cause another pass.
        """
        hooks_before = len(self.hooks)
        passes = 0
        while True:
            passes += 1
            if passes > MAX_RENDER_PASSES:
                raise TooManyRendersError(
                    f"{self} changed its state during render {MAX_RENDER_PASSES} "
                    "times in a row"
                )
            self._dirty = False
            self.hook_index = 0
            token = _current_instance.set(self)
            self._rendering = True
            try:
                vnode = self.component_fn(self.props)
            finally:
                self._rendering = False
                _current_instance.reset(token)
            if not self._dirty:
                break

        if RUNTIME_WARNINGS and self.hook_index < hooks_before:
            logger.warning(
                "%s called %d hooks, but earlier renders called %d. "
                "Hooks must be called unconditionally.",
                self,
                self.hook_index,
                hooks_before,
            )

        logger.debug("Rendered %s (%d pass(es))", self, passes)
        self.vnode = vnode
        return vnode

    def update(self):
        """Re-render after a state change."""
        if self.disposed:
            return
        if self._rendering:
            self._dirty = True
            return

        if self.root_render is not None:
            self.root_render()
        else:
            # TODO: commit nested instances by patching their subtree
            # into the parent once there is a reconciler
            self.render()
            logger.debug("%s has no root render, new tree is not committed", self)
            self.schedule_effects()

    def schedule_effects(self):
        """Hand pending effects over to the scheduler. Call after the commit."""
        if self.pending_effects and not self.disposed:
            self.scheduler.add(self)

    def run_effects(self):
        """
        Run all pending effects in hook order. The previous cleanup of an
        effect runs right before the effect itself.

        Effects are taken off the pending list one at a time. When an effect
        raises, the ones after it stay pending and the instance is queued
        again.
        """
        try:
            while self.pending_effects and not self.disposed:
                index = min(self.pending_effects)
                callback = self.pending_effects.pop(index)
                slot = self.hooks[index]
                if slot.cleanup is not None:
                    cleanup, slot.cleanup = slot.cleanup, None
                    cleanup()
                result = callback()
                if callable(result):
                    slot.cleanup = result
                elif result is not None and RUNTIME_WARNINGS:
                    logger.warning(
                        "Effect %d of %s returned %r; only callables are kept as "
                        "cleanup",
                        index,
                        self,
                        result,
                    )
        finally:
            self.schedule_effects()

    def dispose(self):
        """
        Run all stored cleanups and stop the instance: pending effects are
        dropped and state setters are ignored from now on. The elements are
        removed even when a cleanup raises; the first error is raised
        afterwards.
        """
        if self.disposed:
            return
        self.disposed = True
        self.mounted = False
        self.pending_effects.clear()
        errors = []
        try:
            for slot in self.hooks:
                if isinstance(slot, Effect) and slot.cleanup is not None:
                    cleanup, slot.cleanup = slot.cleanup, None
                    try:
                        cleanup()
                    except Exception as e:
                        errors.append(e)
        finally:
            if self.root_unmount is not None:
                self.root_unmount()
        logger.debug("Disposed %s", self)
        if errors:
            raise errors[0]


def create_component(component_fn, props=None, scheduler=None) -> ComponentInstance:
    return ComponentInstance(component_fn, props, scheduler=scheduler)


def current_instance(hook_name: str) -> ComponentInstance:
    instance = _current_instance.get()
    if instance is None:
        raise InvalidHookContextError(
            f"{hook_name}() can only be called while a component renders"
        )
    return instance


def use_state(initial):
    """
    Returns a ``(value, set_value)`` pair for the state slot at the current
    position.

    On the first render the slot is initialized with `initial`, or with the
    result of calling it when it is callable. `set_value` takes either a new
    value or a function that maps the previous value onto the new one. Only
    an actual change (see `is_same`) triggers a re-render. The setter is the
    same object on every render.
    """
    instance = current_instance("use_state")
    slot, index = instance.next_slot(
        State, lambda: State(initial() if callable(initial) else initial)
    )

    if slot.setter is None:

        def set_value(value):
            if instance.disposed:
                logger.debug("Ignored state change of disposed %s", instance)
                return
            if callable(value):
                value = value(slot.value)
            if is_same(value, slot.value):
                return
            slot.value = value
            logger.debug("State %d of %s changed", index, instance)
            instance.update()

        slot.setter = set_value

    return slot.value, slot.setter


def use_effect(callback: Callable[[], Any], deps: Sequence | None = None):
    """
    Schedule `callback` to run after the current render is committed, when
    any of the `deps` changed since the previous render. Without `deps` the
    effect runs after every render. When the callback returns a callable, it
    is called before the next run of the effect, or when the instance is
    disposed.
    """
    instance = current_instance("use_effect")
    slot, index = instance.next_slot(Effect, Effect)

    deps = None if deps is None else tuple(deps)
    if deps_changed(slot.deps, deps):
        instance.pending_effects[index] = callback
    slot.deps = deps


state = use_state
effect = use_effect
