"""Function registry for dbload value expressions.

Functions are callable from cell values (e.g., `hash secret`, `now`).
A handler receives the ordered list of string arguments, including the
value piped in from a previous stage, and returns the cell value.
Handlers signal bad input by raising (usually ValueError).
"""

import logging
import threading
from contextlib import contextmanager
from typing import Any, Callable, Iterator

logger = logging.getLogger(__name__)

# Handler signature: (args) -> value
FunctionHandler = Callable[[list[str]], Any]


class _ReadWriteLock:
    """Lock admitting many concurrent readers or a single writer.

    Writers are preferred: once a writer is waiting, new readers queue
    behind it.
    """

    def __init__(self):
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writing = False
        self._writers_waiting = 0

    @contextmanager
    def read(self) -> Iterator[None]:
        with self._cond:
            # Waiting writers go first so lookups cannot starve mutation
            while self._writing or self._writers_waiting:
                self._cond.wait()
            self._readers += 1
        try:
            yield
        finally:
            with self._cond:
                self._readers -= 1
                if self._readers == 0:
                    self._cond.notify_all()

    @contextmanager
    def write(self) -> Iterator[None]:
        with self._cond:
            self._writers_waiting += 1
            try:
                while self._writing or self._readers:
                    self._cond.wait()
            finally:
                self._writers_waiting -= 1
            self._writing = True
        try:
            yield
        finally:
            with self._cond:
                self._writing = False
                self._cond.notify_all()


class FunctionRegistry:
    """Thread-safe registry of value expression functions.

    Unlike a module-level table, each registry is an explicit object so
    that tests and embedders can work against an isolated instance. The
    process-wide default lives in `dbload.value.evaluator`.

    Example:
        registry = FunctionRegistry.with_builtins()
        registry.register("double", lambda args: args[0] * 2)

        handler = registry.lookup("double")
        handler(["ab"])  # Returns "abab"
    """

    def __init__(self):
        self._functions: dict[str, FunctionHandler] = {}
        self._lock = _ReadWriteLock()

    @classmethod
    def with_builtins(cls) -> "FunctionRegistry":
        """Create a registry with hash, bcrypt, now and uuid registered."""
        from dbload.value.builtins import register_all_builtins

        registry = cls()
        register_all_builtins(registry)
        return registry

    def register(self, name: str, handler: FunctionHandler) -> None:
        """Register a handler under a name.

        Re-registering an existing name replaces the previous handler.

        Args:
            name: Function name as written in expressions
            handler: Callable taking the argument list
        """
        with self._lock.write():
            replaced = name in self._functions
            self._functions[name] = handler
        if replaced:
            logger.debug("Function '%s' re-registered, previous handler replaced", name)

    def unregister(self, name: str) -> None:
        """Remove a function. Unknown names are ignored."""
        with self._lock.write():
            self._functions.pop(name, None)

    def lookup(self, name: str) -> FunctionHandler | None:
        """Return the handler registered under name, or None."""
        with self._lock.read():
            return self._functions.get(name)

    def is_registered(self, name: str) -> bool:
        """Check if a function is registered."""
        with self._lock.read():
            return name in self._functions

    def list_registered(self) -> list[str]:
        """List all registered function names."""
        with self._lock.read():
            return sorted(self._functions)

    def clear(self) -> None:
        """Clear all registrations. Primarily for testing."""
        with self._lock.write():
            self._functions.clear()
