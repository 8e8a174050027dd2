import abc
import collections
import collections.abc
import numbers
import typing

from quantal.core import iterables
from quantal.core import numerical


class UnitError(Exception):
    """Base class for errors involving units of measure."""


class IncompatibleUnit(UnitError):
    """Two units may not take part in the same operation."""

    def __init__(self, this: typing.Any, that: typing.Any) -> None:
        super().__init__(this, that)
        self.this = this
        self.that = that

    def __str__(self) -> str:
        return f"[{self.this}] is not [{self.that}]"


class UnconvertibleUnit(UnitError):
    """There is no known conversion between two compatible units."""

    def __init__(self, u0: typing.Any, u1: typing.Any, reason: str=None):
        super().__init__(u0, u1)
        self._from = str(u0)
        self._to = str(u1)
        self.reason = reason

    def __str__(self) -> str:
        string = f"Can't convert {self._from!r} to {self._to!r}"
        if self.reason:
            return f"{string}: {self.reason}"
        return string


_SUPERSCRIPTS = str.maketrans('0123456789+-', '⁰¹²³⁴⁵⁶⁷⁸⁹⁺⁻')


def superscript(n: int) -> str:
    """Write an integer with superscript digits (e.g., -2 -> '⁻²')."""
    return str(n).translate(_SUPERSCRIPTS)


class Dimensions(collections.abc.Mapping, iterables.ReprStrMixin):
    """The exponent of each physical dimension of a unit.

    An empty instance represents a dimensionless unit. Dimensions with a zero
    exponent are never stored.
    """

    def __init__(
        self,
        exponents: typing.Mapping[str, int]=None,
    ) -> None:
        given = exponents or {}
        self._exponents = {k: int(v) for k, v in given.items() if v != 0}

    def __getitem__(self, __k: str) -> int:
        return self._exponents[__k]

    def __len__(self) -> int:
        return len(self._exponents)

    def __iter__(self):
        return iter(self._exponents)

    def __eq__(self, other) -> bool:
        if isinstance(other, collections.abc.Mapping):
            return dict(self._exponents) == {
                k: v for k, v in other.items() if v != 0
            }
        return NotImplemented

    def __hash__(self) -> int:
        return hash(frozenset(self._exponents.items()))

    def __str__(self) -> str:
        if not self._exponents:
            return '1'
        return '·'.join(
            key if value == 1 else f"{key}{superscript(value)}"
            for key, value in self._exponents.items()
        )


Term = typing.Tuple['Unit', int]


class Unit(iterables.ReprStrMixin, abc.ABC):
    """Abstract base class for units of measure.

    Units are immutable. Two units are equal if and only if they have the same
    canonical string, which this class computes on first access.
    """

    def __init__(self, symbol: str=None, name: str=None) -> None:
        self._symbol = symbol or None
        self._name = name or None
        self._string = None
        self._system = None
        self._dimensions = None

    @property
    def symbol(self) -> typing.Optional[str]:
        """The symbol that represents this unit, if any."""
        return self._symbol

    @property
    def name(self) -> typing.Optional[str]:
        """The name of this unit, if any."""
        return self._name

    @property
    @abc.abstractmethod
    def factors(self) -> typing.Tuple[Term, ...]:
        """The (unit, exponent) pairs that compose this unit."""
        pass

    @property
    def system_unit(self) -> 'Unit':
        """The equivalent unit expressed only in base units."""
        if self._system is None:
            self._system = self._get_system_unit()
        return self._system

    @abc.abstractmethod
    def _get_system_unit(self) -> 'Unit':
        pass

    @property
    def dimensions(self) -> Dimensions:
        """The physical dimensions of this unit."""
        if self._dimensions is None:
            exponents = collections.Counter()
            for base, exponent in self.system_unit.factors:
                if base.dimension is not None:
                    exponents[base.dimension] += exponent
            self._dimensions = Dimensions(exponents)
        return self._dimensions

    @property
    def dimensionless(self) -> bool:
        """True if this unit has no physical dimension."""
        return not self.dimensions

    def is_compatible(self, other: 'Unit') -> bool:
        """True if this unit has the same dimensions as `other`."""
        return self.dimensions == other.dimensions

    def __bool__(self) -> bool:
        """Always true for a valid instance, including `~metric.ONE`."""
        return True

    def __mul__(self, other):
        """Called for self * other."""
        if isinstance(other, Unit):
            return multiply(self, other)
        return NotImplemented

    def __truediv__(self, other):
        """Called for self / other."""
        if isinstance(other, Unit):
            return divide(self, other)
        return NotImplemented

    def __rtruediv__(self, other):
        """Called for other / self; supports 1 / unit."""
        if isinstance(other, numbers.Number) and other == 1:
            return inverse(self)
        return NotImplemented

    def __pow__(self, exp: numbers.Integral):
        """Called for self ** exp."""
        if isinstance(exp, numbers.Integral):
            return power(self, exp)
        return NotImplemented

    def __eq__(self, other) -> bool:
        """True if the canonical strings match."""
        if isinstance(other, (Unit, str)):
            return str(self) == str(other)
        return NotImplemented

    def __hash__(self) -> int:
        return hash(str(self))

    def __str__(self) -> str:
        """The canonical string form of this unit."""
        if self._string is None:
            self._string = self._get_string()
        return self._string

    @abc.abstractmethod
    def _get_string(self) -> str:
        pass


class BaseUnit(Unit):
    """An irreducible unit.

    A base unit is either one of the roots of a system of units (e.g., metre
    or kilogram) or an application-defined root such as a counting unit. Each
    base unit has a `dimension`, which is `None` for roots that are
    alternates of the dimensionless unit.
    """

    def __init__(
        self,
        symbol: str,
        name: str=None,
        dimension: str=None,
    ) -> None:
        if not symbol:
            raise ValueError("A base unit requires a symbol") from None
        super().__init__(symbol, name)
        self._dimension = dimension

    @property
    def dimension(self) -> typing.Optional[str]:
        """The physical dimension of this root, if any."""
        return self._dimension

    @property
    def factors(self):
        return ((self, 1),)

    def _get_system_unit(self):
        return self

    def _get_string(self):
        return self.symbol


class TransformedUnit(Unit):
    """A unit defined by an affine transformation of another unit.

    A value `x` in this unit corresponds to ``x * scale + offset`` in its
    parent unit.
    """

    def __init__(
        self,
        parent: Unit,
        scale: typing.Any=1,
        offset: typing.Any=0,
        symbol: str=None,
        name: str=None,
    ) -> None:
        if not isinstance(parent, Unit):
            raise TypeError(
                f"The parent of a unit must be a unit, not {type(parent)}"
            ) from None
        super().__init__(symbol, name)
        self._parent = parent
        self._scale = numerical.Factor(scale)
        self._offset = numerical.exact(offset)

    @property
    def parent(self) -> Unit:
        """The unit from which this unit derives."""
        return self._parent

    @property
    def scale(self) -> numerical.Factor:
        """The multiplicative part of the transformation."""
        return self._scale

    @property
    def offset(self):
        """The additive part of the transformation."""
        return self._offset

    @property
    def factors(self):
        return ((self, 1),)

    def _get_system_unit(self):
        return self.parent.system_unit

    def _get_string(self):
        if self.symbol:
            return self.symbol
        string = f"{_group(str(self.parent))}*{self.scale}"
        if self.offset:
            return f"{string}+{numerical.Value(self.offset)}"
        return string


class ProductUnit(Unit):
    """A unit formed from integral powers of other units.

    The product with no factors is the dimensionless unit, `~metric.ONE`.
    """

    def __init__(self, factors: typing.Iterable[Term]=()) -> None:
        super().__init__()
        terms = []
        for unit, exponent in factors:
            if isinstance(unit, ProductUnit):
                raise TypeError("Products may not contain other products")
            if exponent == 0:
                raise ValueError(f"Factor {unit} has zero exponent")
            terms.append((unit, int(exponent)))
        self._factors = tuple(terms)

    @property
    def factors(self):
        return self._factors

    def _get_system_unit(self):
        return _combine((unit.system_unit, e) for unit, e in self.factors)

    def _get_string(self):
        numerator = [_term(u, e) for u, e in self.factors if e > 0]
        denominator = [_term(u, -e) for u, e in self.factors if e < 0]
        top = '·'.join(numerator)
        if not denominator:
            return top
        bottom = '·'.join(denominator)
        if len(denominator) > 1:
            bottom = f"({bottom})"
        return f"{top or '1'}/{bottom}"

    def __len__(self) -> int:
        """The number of factors in this product."""
        return len(self._factors)


ONE = ProductUnit()
"""The dimensionless unit."""


_OPERATORS = ('·', '/', '*', '+')


def _group(string: str) -> str:
    """Enclose a compound unit string in parentheses."""
    if any(c in string for c in _OPERATORS) or string[-1:] in _EXPONENTS:
        return f"({string})"
    return string


_EXPONENTS = set(superscript(n) for n in range(10))


def _term(unit: Unit, exponent: int) -> str:
    """Write a single factor of a product."""
    string = str(unit)
    if exponent == 1:
        return string
    return f"{_group(string)}{superscript(exponent)}"


def _combine(terms: typing.Iterable[Term]) -> Unit:
    """Merge (unit, exponent) pairs into a single unit.

    This function expands products into their factors, sums the exponents of
    equal factors in the order in which they first appear, and drops factors
    whose exponents sum to zero. The result is the bare unit when exactly one
    factor with unit exponent remains.

    A named unit that is identical to its parent (e.g., a registered 'm²'
    defined as 'm^2') contributes the factors of its parent, so that it
    combines with the parent's factors.
    """
    merged = {}
    for unit, exponent in terms:
        for factor, n in _expand(unit):
            key = str(factor)
            if key in merged:
                merged[key][1] += n * exponent
            else:
                merged[key] = [factor, n * exponent]
    factors = [(u, e) for u, e in merged.values() if e != 0]
    if len(factors) == 1 and factors[0][1] == 1:
        return factors[0][0]
    return ProductUnit(factors)


def _expand(unit: Unit) -> typing.Tuple[Term, ...]:
    """Get the factors of `unit` for `_combine`."""
    while (
        isinstance(unit, TransformedUnit)
        and unit.scale.is_one()
        and unit.offset == 0
        and str(unit) == str(unit.parent)
    ):
        unit = unit.parent
    return unit.factors


def multiply(a: Unit, b: Unit) -> Unit:
    """Compute the product of two units."""
    return _combine([(a, 1), (b, 1)])


def divide(a: Unit, b: Unit) -> Unit:
    """Compute the ratio of two units."""
    return _combine([(a, 1), (b, -1)])


def power(u: Unit, n: int) -> Unit:
    """Raise a unit to an integral power."""
    if n == 0:
        return ONE
    return _combine([(u, n)])


def inverse(u: Unit) -> Unit:
    """Compute the reciprocal of a unit."""
    return power(u, -1)


def system_unit(u: Unit) -> Unit:
    """Express `u` in base units only."""
    return u.system_unit


def is_compatible(a: Unit, b: Unit) -> bool:
    """True if the two units have the same physical dimensions."""
    return a.is_compatible(b)


def dimensionless(u: Unit) -> bool:
    """True if `u` is compatible with `~metric.ONE`."""
    return is_compatible(u, ONE)


def transform(
    parent: Unit,
    factor: typing.Any=1,
    offset: typing.Any=0,
    symbol: str=None,
    name: str=None,
) -> TransformedUnit:
    """Define a new unit relative to `parent`."""
    return TransformedUnit(
        parent,
        scale=factor,
        offset=offset,
        symbol=symbol,
        name=name,
    )


def scaled(parent: Unit, factor: typing.Any) -> TransformedUnit:
    """Create the unit equal to `factor` times `parent`.

    The symbol of the new unit has the form 'parent*factor' (e.g., '元*10.12').
    """
    scale = numerical.Factor(factor)
    return TransformedUnit(
        parent,
        scale=scale,
        symbol=f"{_group(str(parent))}*{scale}",
    )
