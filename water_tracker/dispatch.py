"""
Main-Context Dispatcher

Tracker state has exactly one owning context. Anything arriving from
another thread (an MQTT network callback, say) is posted here and run
later by the owner, in order, between its own mutations.
"""

import queue
from typing import Callable


class MainContextDispatcher:
    """A FIFO of callables, filled from any thread, drained by the owner."""
    
    def __init__(self):
        self._pending: "queue.SimpleQueue[Callable[[], None]]" = queue.SimpleQueue()
    
    def post(self, task: Callable[[], None]) -> None:
        """Queue a task for the owner. Safe from any thread."""
        self._pending.put(task)
    
    def pending_count(self) -> int:
        return self._pending.qsize()
    
    def drain(self) -> int:
        """
        Run every queued task on the calling context.
        
        Tasks posted while draining are run in the same pass.
        Returns the number of tasks run.
        """
        ran = 0
        while True:
            try:
                task = self._pending.get_nowait()
            except queue.Empty:
                return ran
            task()
            ran += 1
