"""A small immutable builder for command-line argument lists."""

from __future__ import annotations

from collections.abc import Iterable, Iterator


class ArgBuilder:
    """Collects command arguments; every method returns a new builder."""

    __slots__ = ("_args",)

    def __init__(self, args: Iterable[str] = ()) -> None:
        self._args: tuple[str, ...] = tuple(str(arg) for arg in args)

    def arg(self, arg: str) -> ArgBuilder:
        """Add a single argument."""
        return ArgBuilder((*self._args, str(arg)))

    def add_with_value(self, arg: str, value: str) -> ArgBuilder:
        """Add an argument followed by its value."""
        return self.arg(arg).arg(value)

    def add_flag_if(self, name: str, value: bool) -> ArgBuilder:
        """Add the flag `name` only if `value` is true."""
        return self.arg(name) if value else self

    def add_opt_value(self, name: str, value: str | None) -> ArgBuilder:
        """Add an argument with a value, or nothing if the value is None."""
        if value is None:
            return self
        return self.add_with_value(name, value)

    def add_value_list(self, name: str, value_list: Iterable[str]) -> ArgBuilder:
        """Add an argument whose values are joined by commas.

        Nothing is added when there are no values.
        """
        values = [str(value) for value in value_list]
        if not values:
            return self
        return self.add_with_value(name, ",".join(values))

    def add_values_separately(self, name: str, value_list: Iterable[str]) -> ArgBuilder:
        """Add the argument name once for each value."""
        builder = self
        for value in value_list:
            builder = builder.add_with_value(name, value)
        return builder

    def append(self, other: Iterable[str]) -> ArgBuilder:
        """Add all arguments of `other` after the current ones."""
        return ArgBuilder((*self._args, *other))

    def __iter__(self) -> Iterator[str]:
        return iter(self._args)

    def __len__(self) -> int:
        return len(self._args)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ArgBuilder):
            return NotImplemented
        return self._args == other._args

    def __hash__(self) -> int:
        return hash(self._args)

    def __repr__(self) -> str:
        return f"ArgBuilder({list(self._args)!r})"