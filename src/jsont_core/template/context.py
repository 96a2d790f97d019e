"""Scoped variable lookup for template expansion."""

from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from jsont_core.errors import create_error
from jsont_core.types import Value, is_mapping, is_sequence, kind_of

from .types import CURRENT_SCOPE


class ScopedContext:
    """Stack of data scopes, one per open section.

    Names that are not in the current scope are searched for up the stack.
    Each expansion builds its own ScopedContext; it is never shared.
    """

    def __init__(self, data: Value):
        """Initialize context with the root data value.

        Args:
            data: Data the template is expanded against
        """
        self._stack: list[Any] = [data]
        self._labels: list[str] = [CURRENT_SCOPE]

    def __str__(self) -> str:
        return f"<Context {' '.join(self._labels)}>"

    @property
    def depth(self) -> int:
        return len(self._stack)

    def push_section(self, name: str) -> bool:
        """Enter the member ``name`` of the current scope.

        A member that is present is pushed even when its value is falsy.

        Args:
            name: Section name

        Returns:
            True if the member was pushed, False if the current scope has no
            such member (nothing is pushed; the caller must not pop)
        """
        top = self._stack[-1]
        if not is_mapping(top) or name not in top:
            return False
        self._push(name, top[name])
        return True

    def pop(self) -> Any:
        """Leave the current scope and return its value.

        Raises:
            RuntimeError: If called without a matching push
        """
        if len(self._stack) == 1:
            raise RuntimeError("pop() called on the root scope")
        self._labels.pop()
        return self._stack.pop()

    def current_value(self) -> Any:
        """Return the value of the current scope."""
        return self._stack[-1]

    def lookup(self, name: str) -> Any:
        """Find ``name`` in the nearest enclosing scope that defines it.

        Scalars and lists cannot own names, so they are skipped.

        Args:
            name: Variable name

        Returns:
            The value bound to ``name``

        Raises:
            UndefinedVariable: If no scope defines ``name``
        """
        for scope in reversed(self._stack):
            if is_mapping(scope) and name in scope:
                return scope[name]
        raise create_error("UNDEFINED_VARIABLE", name=name)

    @contextmanager
    def section(self, name: str) -> Iterator[Any]:
        """Scope a block of work to the member ``name``.

        Yields the member's value, or None when it is absent (then nothing is
        pushed). The scope is left on exit, including error exits.
        """
        if not self.push_section(name):
            yield None
            return
        try:
            yield self.current_value()
        finally:
            self.pop()

    def iterate(self) -> Iterator[int]:
        """Make each element of the current list the current scope in turn.

        Yields the zero-based position of the element. One frame is pushed per
        element and popped before the next one; once the generator is
        exhausted or closed the stack is as it was before.

        Raises:
            EvaluationError: If the current scope is not a list
        """
        items = self.current_value()
        if not is_sequence(items):
            raise create_error(
                "EXPECTED_LIST", type_name=_type_name(items), section=self._labels[-1]
            )
        label = self._labels[-1]
        for index, item in enumerate(items):
            self._push(f"{label}[{index}]", item)
            try:
                yield index
            finally:
                self.pop()

    def _push(self, label: str, value: Any) -> None:
        self._labels.append(label)
        self._stack.append(value)


def _type_name(value: Any) -> str:
    try:
        return kind_of(value).value
    except TypeError:
        return type(value).__name__
