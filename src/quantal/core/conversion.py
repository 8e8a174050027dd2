import decimal
import typing

from quantal.core import iterables
from quantal.core import metric
from quantal.core import numerical
from quantal.logger import logger


class Converter(iterables.ReprStrMixin):
    """An affine function that converts values between two units.

    Calling an instance on a value `x` computes ``x * scale + offset``. The
    scale is an exact `~numerical.Factor` and the offset is an exact rational
    number, so composing converters never accumulates rounding error.
    """

    def __init__(self, scale: typing.Any=1, offset: typing.Any=0) -> None:
        self._scale = numerical.Factor(scale)
        self._offset = numerical.exact(offset)

    @property
    def scale(self) -> numerical.Factor:
        """The multiplicative part of this converter."""
        return self._scale

    @property
    def offset(self):
        """The additive part of this converter."""
        return self._offset

    @property
    def is_linear(self) -> bool:
        """True if this converter has no offset."""
        return self._offset == 0

    @property
    def is_identity(self) -> bool:
        """True if this converter does not change its argument."""
        return self.is_linear and self._scale.is_one()

    @property
    def linear(self):
        """The linear part of this converter."""
        if self.is_linear:
            return self
        return Converter(self._scale)

    def then(self, other: 'Converter'):
        """Create the converter that applies this one followed by `other`.

        The result has ``scale = s0 * s1`` and ``offset = s1 * o0 + o1``.

        Raises
        ------
        ValueError
            The new offset would involve π and therefore not be exact.
        """
        scale = self._scale * other.scale
        if self._offset == 0:
            return Converter(scale, other.offset)
        if not other.scale.is_exact:
            raise ValueError(
                f"Can't compose an offset with the inexact scale {other.scale}"
            ) from None
        offset = other.scale.rational * self._offset + other.offset
        return Converter(scale, offset)

    def inverse(self):
        """Create the converter that undoes this one."""
        scale = self._scale.inverse()
        if self._offset == 0:
            return Converter(scale)
        if not scale.is_exact:
            raise ValueError(
                f"Can't invert an offset with the inexact scale {scale}"
            ) from None
        return Converter(scale, -self._offset * scale.rational)

    def __pow__(self, n: int):
        """Called for self ** n; only defined for linear converters."""
        if not self.is_linear:
            raise ValueError(
                f"Can't raise the affine converter {self} to a power"
            ) from None
        return Converter(self._scale ** n)

    def __call__(self, value: typing.Any, precision: int=None):
        """Convert `value`.

        The result is exact unless the scale involves π, in which case this
        method computes it with `~numerical.GUARD` extra digits and then
        rounds it to `precision` significant digits (see
        `~numerical.rationalize`). Converting such a result back recovers
        the value that was converted.
        """
        x = numerical.Value(value)
        if self._scale.is_exact:
            return numerical.Value(
                x.exact * self._scale.rational + self._offset
            )
        digits = precision or numerical.PRECISION
        working = digits + numerical.GUARD
        factor = self._scale.evaluate(working)
        with decimal.localcontext() as context:
            context.prec = working
            result = (
                x.to_decimal(working) * factor.to_decimal(working)
                + numerical.Value(self._offset).to_decimal(working)
            )
        return numerical.rationalize(result, digits)

    def __eq__(self, other) -> bool:
        if isinstance(other, Converter):
            return (
                self._scale == other.scale and self._offset == other.offset
            )
        return NotImplemented

    def __hash__(self) -> int:
        return hash((self._scale, self._offset))

    def __str__(self) -> str:
        string = f"x * {self._scale}"
        if self._offset:
            return f"{string} + {numerical.Value(self._offset)}"
        return string


IDENTITY = Converter()
"""The converter that leaves values unchanged."""


def system_converter(unit: metric.Unit) -> Converter:
    """Create the converter from `unit` to its system unit.

    The converter of a product includes only the linear part of each factor,
    since an offset (e.g., of degrees Celsius) has no meaning in a product.
    """
    if isinstance(unit, metric.BaseUnit):
        return IDENTITY
    if isinstance(unit, metric.TransformedUnit):
        own = Converter(unit.scale, unit.offset)
        return own.then(system_converter(unit.parent))
    if isinstance(unit, metric.ProductUnit):
        result = IDENTITY
        for factor, exponent in unit.factors:
            result = result.then(system_converter(factor).linear ** exponent)
        return result
    raise TypeError(f"Unknown type of unit: {type(unit)}") from None


def _same_shape(source: metric.Unit, target: metric.Unit) -> bool:
    """True if two products have pairwise compatible factors."""
    if not (
        isinstance(source, metric.ProductUnit)
        and isinstance(target, metric.ProductUnit)
    ): return False
    if len(source) != len(target):
        return False
    return all(
        e0 == e1 and u0.is_compatible(u1)
        for (u0, e0), (u1, e1) in zip(source.factors, target.factors)
    )


def converter(source: metric.Unit, target: metric.Unit) -> Converter:
    """Create the converter from `source` to `target`.

    Raises
    ------
    `~metric.IncompatibleUnit`
        The units do not have the same dimensions.
    `~metric.UnconvertibleUnit`
        The units have the same dimensions but there is no conversion between
        them (e.g., between different counting units, or between products
        whose factors are arranged differently).
    """
    if not source.is_compatible(target):
        raise metric.IncompatibleUnit(source, target)
    if source == target:
        return IDENTITY
    if _same_shape(source, target):
        result = IDENTITY
        for (u0, exponent), (u1, _) in zip(source.factors, target.factors):
            result = result.then(converter(u0, u1).linear ** exponent)
        logger.debug("Converting %r to %r by factor: %s", source, target, result)
        return result
    if source.system_unit != target.system_unit:
        raise metric.UnconvertibleUnit(source, target)
    try:
        result = system_converter(source).then(
            system_converter(target).inverse()
        )
    except ValueError as err:
        raise metric.UnconvertibleUnit(source, target, str(err)) from err
    logger.debug("Converting %r to %r: %s", source, target, result)
    return result


def convert(
    value: typing.Any,
    source: metric.Unit,
    target: metric.Unit,
) -> numerical.Value:
    """Convert `value` from `source` to `target`."""
    return converter(source, target)(value)
