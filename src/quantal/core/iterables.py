import typing


class ReprStrMixin:
    """A mixin class that provides support for `__repr__`.

    The representation has the form ``module.Class(string)``, where `string`
    is the result of `__str__`, which concrete classes define.
    """

    __slots__ = ()

    def __repr__(self) -> str:
        """An unambiguous representation of this object."""
        module = f"{self.__module__.replace('quantal.', '')}."
        name = self.__class__.__qualname__
        return f"{module}{name}({self})"


def join(
    items: typing.Iterable[typing.Any],
    separator: str=', ',
    final: str=None,
) -> str:
    """Join the string form of `items`, optionally with a distinct final
    separator (e.g., `final=' or '`)."""
    strings = [str(item) for item in items]
    if final is None or len(strings) < 2:
        return separator.join(strings)
    return f"{separator.join(strings[:-1])}{final}{strings[-1]}"
