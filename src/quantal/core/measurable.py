import operator as standard
import typing

from quantal.core import algebraic
from quantal.core import compatibility
from quantal.core import conversion
from quantal.core import iterables
from quantal.core import metric
from quantal.core import numerical


KINDS = {
    'length': {'L': 1},
    'area': {'L': 2},
    'volume': {'L': 3},
    'mass': {'M': 1},
    'time': {'T': 1},
    'temperature': {'Θ': 1},
    'angle': {},
    'dimensionless': {},
    'money': {},
    'sku': {},
    'work time': {'T': 1},
    'unknown': None,
}
"""The dimensions of each kind of quantity (`None` accepts any)."""


class Quantity(algebraic.Scalar, iterables.ReprStrMixin):
    """A numerical value with a unit of measure.

    Instances are immutable. Every operation returns a new instance and leaves
    its operands unchanged. Addition, subtraction, comparison, and conversion
    first apply the rules in `~compatibility` to the units involved, so that,
    for example, adding a number of '个' to a number of '框' fails even though
    both units are dimensionless.
    """

    def __init__(
        self,
        value: typing.Any=0,
        unit: metric.Unit=metric.ONE,
    ) -> None:
        """
        Parameters
        ----------
        value : number-like, default=0
            The numerical value. See `~numerical.Value` for allowed types.

        unit : `~metric.Unit`, default=`~metric.ONE`
            The unit of this quantity.
        """
        if not isinstance(unit, metric.Unit):
            raise TypeError(
                f"The unit of a quantity must be a unit, not {type(unit)}"
            ) from None
        self._value = numerical.Value(value)
        self._unit = unit

    @classmethod
    def parse(cls, string: str, units):
        """Create a new instance from `string`, using a unit registry.

        See `~registry.Registry.quantity`.
        """
        return units.quantity(string)

    @property
    def value(self) -> numerical.Value:
        """The numerical value of this quantity."""
        return self._value

    @property
    def unit(self) -> metric.Unit:
        """The unit of this quantity."""
        return self._unit

    def add(self, other: 'Quantity'):
        """Compute self + other, in the unit of this quantity."""
        return self._new(self._value.add(self._converted(other)))

    def subtract(self, other: 'Quantity'):
        """Compute self - other, in the unit of this quantity."""
        return self._new(self._value.subtract(self._converted(other)))

    def multiply(self, other):
        """Compute self * other.

        If `other` is a quantity, the result has the product of the system
        units of both quantities. Otherwise, the result has the unit of this
        quantity.
        """
        if isinstance(other, Quantity):
            this, that = self.to_system_unit(), other.to_system_unit()
            return type(self)(
                this.value.multiply(that.value),
                metric.multiply(this.unit, that.unit),
            )
        return self._new(self._value.multiply(other))

    def divide(self, other):
        """Compute self / other.

        If `other` is a quantity, the result has the ratio of the system units
        of both quantities. Otherwise, the result has the unit of this
        quantity.
        """
        if isinstance(other, Quantity):
            this, that = self.to_system_unit(), other.to_system_unit()
            return type(self)(
                this.value.divide(that.value),
                metric.divide(this.unit, that.unit),
            )
        return self._new(self._value.divide(other))

    def inverse(self):
        """Compute 1 / self."""
        return type(self)(self._value.reciprocal(), metric.inverse(self._unit))

    def negate(self):
        """Compute -self."""
        return self._new(self._value.negate())

    def power(self, n: int):
        """Raise this quantity to an integral power."""
        exponent = numerical.Value(n)
        if not exponent.is_integer():
            raise ValueError(
                f"Can't raise {self} to non-integral power {n}"
            ) from None
        return type(self)(
            self._value.power(exponent),
            metric.power(self._unit, int(exponent)),
        )

    def to(self, unit: metric.Unit):
        """Convert this quantity to `unit`.

        Raises
        ------
        `~metric.IncompatibleUnit`
            The units may not combine (see `~compatibility.check`).
        `~metric.UnconvertibleUnit`
            There is no conversion between the units.
        """
        compatibility.require(self._unit, unit)
        value = conversion.convert(self._value, self._unit, unit)
        return type(self)(value, unit)

    def to_system_unit(self):
        """Convert this quantity to the system unit of its unit."""
        converter = conversion.system_converter(self._unit)
        return type(self)(converter(self._value), self._unit.system_unit)

    def is_equivalent_to(self, other: 'Quantity') -> bool:
        """True if `other` represents the same amount as this quantity."""
        return self._value == self._converted(other)

    def compare_to(self, other: 'Quantity') -> int:
        """Compare this quantity to `other`, in the unit of this quantity.

        Returns
        -------
        int
            -1, 0, or 1 as this quantity is less than, equal to, or greater
            than `other`.
        """
        return self._value.compare(self._converted(other))

    def check_must_be(
        self,
        unit: metric.Unit,
    ) -> typing.Optional[metric.IncompatibleUnit]:
        """Check whether this quantity has exactly the given unit.

        Returns
        -------
        `~metric.IncompatibleUnit` or `None`
            The failure, if the units differ, or `None` if they do not.
        """
        if not self._unit.is_compatible(unit) or str(self._unit) != str(unit):
            return metric.IncompatibleUnit(self._unit, unit)

    def assert_must_be(self, unit: metric.Unit):
        """Require that this quantity have exactly the given unit.

        Returns
        -------
        `~measurable.Quantity`
            This instance, to allow chaining.

        Raises
        ------
        `~metric.IncompatibleUnit`
            The units differ.
        """
        if error := self.check_must_be(unit):
            raise error
        return self

    def check_included_in_units(self, units):
        """Check whether a registry contains the unit of this quantity.

        Returns
        -------
        `~registry.UnregisteredUnit` or `None`
            The failure, if `units` does not contain the unit of this
            quantity, or `None` if it does.
        """
        return units.check_registered(self._unit)

    def assert_included_in_units(self, units):
        """Require that a registry contain the unit of this quantity.

        Returns
        -------
        `~measurable.Quantity`
            This instance, to allow chaining.

        Raises
        ------
        `~registry.UnregisteredUnit`
            The registry does not contain the unit of this quantity.
        """
        if error := self.check_included_in_units(units):
            raise error
        return self

    def as_type(self, kind: str):
        """Require that this quantity be of the given kind.

        Parameters
        ----------
        kind : string
            One of the keys of `~measurable.KINDS`.

        Returns
        -------
        `~measurable.Quantity`
            This instance, to allow chaining.

        Raises
        ------
        ValueError
            The kind is unknown.
        TypeError
            The unit of this quantity does not have the dimensions of `kind`.
        """
        if kind not in KINDS:
            raise ValueError(
                f"Unknown kind of quantity {kind!r}"
                f"; expected one of {iterables.join(KINDS, final=' or ')}"
            ) from None
        expected = KINDS[kind]
        if expected is not None and self._unit.dimensions != expected:
            raise TypeError(
                f"Can't treat {self} as {kind!r}:"
                f" its dimensions are {self._unit.dimensions}"
            ) from None
        return self

    def _converted(self, other: 'Quantity') -> numerical.Value:
        """Express the value of `other` in the unit of this quantity."""
        if not isinstance(other, Quantity):
            raise TypeError(
                f"Can't combine {type(self)} with {type(other)}"
            ) from None
        compatibility.require(self._unit, other.unit)
        return conversion.convert(other.value, other.unit, self._unit)

    def _new(self, value: typing.Any, unit: metric.Unit=None):
        """Create a new instance with `value`, and this unit by default."""
        return type(self)(value, self._unit if unit is None else unit)

    def implement(self, func, mode, *others, **kwargs):
        """Implement a standard operator in terms of the methods above."""
        if mode == 'cast':
            return func(self._value)
        if mode == 'arithmetic':
            return self._new(func(self._value, *others))
        other = others[0]
        if mode == 'comparison':
            if isinstance(other, Quantity):
                return func(self.compare_to(other), 0)
            return NotImplemented
        if mode == 'forward':
            return self._forward(func, other)
        if mode == 'reverse':
            return self._reverse(func, other)
        raise ValueError(f"Unknown operator mode {mode!r}")

    def _forward(self, func, other):
        """Helper for `implement` with self as the left operand."""
        if func in (standard.add, standard.sub):
            if not isinstance(other, Quantity):
                return NotImplemented
            if func is standard.add:
                return self.add(other)
            return self.subtract(other)
        if func in (standard.mul, standard.truediv):
            if not isinstance(other, (Quantity, algebraic.Real)):
                return NotImplemented
            if func is standard.mul:
                return self.multiply(other)
            return self.divide(other)
        if func is standard.pow and isinstance(other, algebraic.Real):
            return self.power(other)
        return NotImplemented

    def _reverse(self, func, other):
        """Helper for `implement` with self as the right operand."""
        if not isinstance(other, algebraic.Real):
            return NotImplemented
        if func is standard.mul:
            return self.multiply(other)
        if func is standard.truediv:
            return self.inverse().multiply(other)
        return NotImplemented

    def __eq__(self, other) -> bool:
        """True if both value and unit are equal."""
        if isinstance(other, Quantity):
            return self._value == other.value and self._unit == other.unit
        return NotImplemented

    def __hash__(self) -> int:
        return hash((self._value, str(self._unit)))

    def __str__(self) -> str:
        unit = str(self._unit)
        if unit:
            return f"{self._value} {unit}"
        return str(self._value)


def add(a: Quantity, b: Quantity) -> Quantity:
    """Add two quantities of any kind."""
    return a.as_type('unknown').add(b.as_type('unknown'))


def subtract(a: Quantity, b: Quantity) -> Quantity:
    """Subtract two quantities of any kind."""
    return a.as_type('unknown').subtract(b.as_type('unknown'))


def to(q: Quantity, unit: metric.Unit) -> Quantity:
    """Convert a quantity of any kind to `unit`."""
    return q.as_type('unknown').to(unit)


def compare(x: Quantity, y: Quantity) -> int:
    """Compare two quantities of any kind, in the unit of the second."""
    return x.as_type('unknown').to(y.unit).value.compare(y.value)
