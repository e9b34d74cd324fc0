import asyncio
import logging
from weakref import ref

from hooklet.types import EventLoopType

logger = logging.getLogger(__name__)


class Scheduler:
    """
    Queue of component instances with pending effects.

    Instances are added after their render has been committed. The queue
    is drained in `flush`, which is requested according to the event loop
    type:

    * ASYNC (default): on the next turn of the running asyncio loop. Without
      a running loop, the flush is queued on a loop owned by the scheduler
      that is driven by `run_pending`.
    * QT: from a zero-interval Qt timer.
    * SYNC: right after the commit that added the instance, before control
      returns to the caller. Meant for tests and scripts that opt in.
    """

    def __init__(self, event_loop_type=EventLoopType.ASYNC):
        self.queue = []
        self._flushing = False
        self._flush_requested = False
        self._idle_loop = None
        self._event_loop_type = None
        self.event_loop_type = event_loop_type

    @property
    def event_loop_type(self):
        return self._event_loop_type

    @event_loop_type.setter
    def event_loop_type(self, value):
        if self._event_loop_type != value:
            self._event_loop_type = value

            if self._event_loop_type == EventLoopType.SYNC:
                self._request_flush = self.flush
            elif self._event_loop_type == EventLoopType.ASYNC:

                def request_flush():
                    try:
                        loop = asyncio.get_running_loop()
                    except RuntimeError:
                        loop = self.idle_loop()
                    loop.call_soon(self.flush)

                self._request_flush = request_flush
            elif self._event_loop_type == EventLoopType.QT:
                from PySide6 import QtCore

                self._qt_timer = QtCore.QTimer()
                self._qt_timer.setSingleShot(True)
                self._qt_timer.setInterval(0)

                weak_self = ref(self)
                self._qt_timer.timeout.connect(
                    lambda: weak_self() and weak_self().flush()
                )

                self._request_flush = self._qt_timer.start
            else:
                raise TypeError(f"Expected an EventLoopType but got {value!r}")

    def idle_loop(self):
        """Loop that holds flushes requested while no asyncio loop is running"""
        if self._idle_loop is None or self._idle_loop.is_closed():
            self._idle_loop = asyncio.new_event_loop()
        return self._idle_loop

    def run_pending(self):
        """
        Run the flushes that were requested while no asyncio loop was running.
        """
        loop = self._idle_loop
        if loop is None or loop.is_closed() or loop.is_running():
            return
        # Callbacks run in order: the pending flushes first, then the stop
        loop.call_soon(loop.stop)
        loop.run_forever()

    def close(self):
        self.clear()
        if self._idle_loop is not None and not self._idle_loop.is_closed():
            self._idle_loop.close()
        self._idle_loop = None

    def request_flush(self):
        if self._flushing or self._flush_requested:
            # The running (or requested) flush will pick up the new items
            return
        self._flush_requested = True
        try:
            self._request_flush()
        except Exception:
            self._flush_requested = False
            raise

    def add(self, instance):
        if instance not in self.queue:
            self.queue.append(instance)
            logger.debug("Scheduled effects for %s", instance)

        try:
            self.request_flush()
        except Exception:
            if instance in self.queue:
                self.queue.remove(instance)
            raise

    def flush(self):
        if self._flushing:
            return
        self._flush_requested = False
        self._flushing = True
        try:
            while self.queue:
                instance = self.queue.pop(0)
                instance.run_effects()
        finally:
            self._flushing = False
            if self.queue:
                # Instances left behind when an effect raised
                self.request_flush()

    def clear(self):
        self.queue.clear()
        self._flush_requested = False


scheduler = Scheduler()
