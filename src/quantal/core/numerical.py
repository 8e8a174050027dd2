import decimal
import fractions
import functools
import math
import numbers
import operator
import re
import typing

import numpy

import quantal
from quantal.core import algebraic
from quantal.core import iterables
from quantal.logger import logger


PRECISION = quantal.Settings().getint('precision')
"""The default number of significant digits in an inexact result.

`quantal.settings` updates this value at run time.
"""


GUARD = 5
"""The number of extra digits in intermediate inexact computations."""


KINDS = ('integer', 'decimal', 'rational')
"""The available numeric representations, from narrowest to widest."""


_NUMBER = re.compile(
    r'[-+]?(?:\d+/\d+|(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][-+]?\d+)?)'
)
"""A regular expression that matches a number in string form."""


def parse(string: str) -> fractions.Fraction:
    """Convert `string` into an exact rational number.

    This function accepts integers (``'12'``), decimals (``'1.25'``), numbers
    in scientific notation (``'1.5e-3'``), and ratios of integers
    (``'1/3'``), each with an optional sign.
    """
    text = string.strip()
    if not _NUMBER.fullmatch(text):
        raise ValueError(f"Can't interpret {string!r} as a number")
    try:
        return fractions.Fraction(text)
    except ZeroDivisionError as err:
        raise ValueError(f"{string!r} has a zero denominator") from err


def exact(arg: typing.Any) -> fractions.Fraction:
    """Compute the exact rational value of a number-like object.

    Floating-point numbers enter via their shortest string representation, so
    that ``exact(0.1) == Fraction(1, 10)``.
    """
    if isinstance(arg, Value):
        return arg.exact
    if isinstance(arg, fractions.Fraction):
        return arg
    if isinstance(arg, (int, numpy.integer)):
        return fractions.Fraction(int(arg))
    # numpy.float64 is also a float, but its repr includes the type name.
    if isinstance(arg, numpy.floating):
        return _from_decimal(decimal.Decimal(str(arg)))
    if isinstance(arg, float):
        return _from_decimal(decimal.Decimal(repr(arg)))
    if isinstance(arg, decimal.Decimal):
        return _from_decimal(arg)
    if isinstance(arg, numbers.Rational):
        return fractions.Fraction(arg.numerator, arg.denominator)
    if isinstance(arg, str):
        return parse(arg)
    raise TypeError(f"Can't create a number from {type(arg)}")


def _from_decimal(d: decimal.Decimal) -> fractions.Fraction:
    """Helper for `exact` with decimal input."""
    if not d.is_finite():
        raise ValueError(f"Can't represent {d} exactly")
    return fractions.Fraction(d)


def _decimal_scale(denominator: int) -> typing.Optional[int]:
    """Compute the number of decimal places that `denominator` requires.

    The result is `None` if the denominator has a prime factor other than 2
    or 5, in which case the quotient does not terminate.
    """
    twos = fives = 0
    while denominator % 2 == 0:
        denominator //= 2
        twos += 1
    while denominator % 5 == 0:
        denominator //= 5
        fives += 1
    if denominator != 1:
        return None
    return max(twos, fives)


def _narrow(this: fractions.Fraction) -> typing.Tuple[str, typing.Any]:
    """Find the narrowest exact representation of a rational number."""
    if this.denominator == 1:
        return 'integer', this.numerator
    scale = _decimal_scale(this.denominator)
    if scale is None:
        return 'rational', this
    digits = this.numerator * 10**scale // this.denominator
    return 'decimal', decimal.Decimal(f"{digits}E-{scale}")


class Value(algebraic.Scalar, iterables.ReprStrMixin):
    """An exact real number in its narrowest representation.

    Every instance holds an integer, a finite decimal, or a ratio of integers,
    depending on which is the narrowest exact representation of the number.
    Arithmetic operations compute an exact rational result and narrow it
    again, so that, for example, ``Value('0.5') * 4`` is the integer 2 and
    ``Value(1) / 3`` is the rational 1/3.
    """

    def __init__(self, arg: typing.Any=0) -> None:
        """
        Parameters
        ----------
        arg : number-like or string, default=0
            The numerical value. May be an ``int``, ``float``,
            ``decimal.Decimal``, ``fractions.Fraction``, numpy scalar, string
            (see `~numerical.parse`), or another instance of this class.
        """
        self._exact = exact(arg)
        self._kind, self._data = _narrow(self._exact)

    @classmethod
    def parse(cls, string: str):
        """Create a new instance from a string."""
        return cls(parse(string))

    @property
    def kind(self) -> str:
        """The current representation: one of `~numerical.KINDS`."""
        return self._kind

    @property
    def data(self) -> typing.Union[int, decimal.Decimal, fractions.Fraction]:
        """The value in its current representation."""
        return self._data

    @property
    def exact(self) -> fractions.Fraction:
        """The value as an exact rational number."""
        return self._exact

    @property
    def numerator(self) -> int:
        return self._exact.numerator

    @property
    def denominator(self) -> int:
        return self._exact.denominator

    @property
    def scale(self) -> typing.Optional[int]:
        """The number of decimal places, if this value has a finite number."""
        if self._kind == 'integer':
            return 0
        if self._kind == 'decimal':
            return -self._data.as_tuple().exponent
        return None

    def to_decimal(self, precision: int=None) -> decimal.Decimal:
        """Convert this value to a decimal number.

        The result is exact unless this value is rational, in which case it
        has `precision` significant digits.
        """
        if self._kind != 'rational':
            return decimal.Decimal(self._data)
        with decimal.localcontext() as context:
            context.prec = precision or PRECISION
            return (
                decimal.Decimal(self.numerator)
                / decimal.Decimal(self.denominator)
            )

    def add(self, other):
        """Compute self + other."""
        return type(self)(self._exact + exact(other))

    def subtract(self, other):
        """Compute self - other."""
        return type(self)(self._exact - exact(other))

    def multiply(self, other):
        """Compute self * other."""
        return type(self)(self._exact * exact(other))

    def divide(self, other):
        """Compute self / other.

        Raises
        ------
        ZeroDivisionError
            The divisor is zero.
        """
        return type(self)(self._exact / exact(other))

    def divide_and_remainder(self, other):
        """Compute the truncated quotient and the remainder of self / other.

        The quotient rounds toward zero, so the remainder has the sign of this
        value (e.g., ``Value(-7).divide_and_remainder(2)`` is ``(-3, -1)``).
        """
        divisor = exact(other)
        if divisor == 0:
            raise ZeroDivisionError(f"Can't divide {self} by zero")
        quotient = math.trunc(self._exact / divisor)
        remainder = self._exact - quotient * divisor
        return type(self)(quotient), type(self)(remainder)

    def power(self, exponent):
        """Compute self ** exponent for an integral exponent."""
        n = exact(exponent)
        if n.denominator != 1:
            raise ValueError(
                f"Can't raise {self} to non-integral power {exponent}"
            ) from None
        return type(self)(self._exact ** n.numerator)

    def reciprocal(self):
        """Compute 1 / self."""
        return type(self)(1 / self._exact)

    def negate(self):
        """Compute -self."""
        return type(self)(-self._exact)

    def abs(self):
        """Compute |self|."""
        return type(self)(abs(self._exact))

    def exp(self, precision: int=None):
        """Compute e ** self to `precision` significant digits."""
        digits = precision or PRECISION
        with decimal.localcontext() as context:
            context.prec = digits
            return type(self)(self.to_decimal(digits).exp())

    def log(self, precision: int=None):
        """Compute the natural logarithm to `precision` significant digits."""
        if self._exact <= 0:
            raise ValueError(f"Can't compute the logarithm of {self}")
        digits = precision or PRECISION
        with decimal.localcontext() as context:
            context.prec = digits
            return type(self)(self.to_decimal(digits).ln())

    def compare(self, other) -> int:
        """Return -1, 0, or 1 as self is less than, equal to, or greater than
        other."""
        that = exact(other)
        if self._exact < that:
            return -1
        if self._exact > that:
            return 1
        return 0

    def is_zero(self) -> bool:
        return self._exact == 0

    def is_one(self) -> bool:
        return self._exact == 1

    def is_less_than_one(self) -> bool:
        return self._exact < 1

    def is_integer(self) -> bool:
        return self._kind == 'integer'

    def implement(self, func, mode, *others, **kwargs):
        """Implement a standard operator on exact rational values."""
        if mode == 'cast':
            return func(self._exact)
        if mode == 'arithmetic':
            return type(self)(func(self._exact, *others))
        if not all(isinstance(other, algebraic.Real) for other in others):
            return NotImplemented
        values = [exact(other) for other in others]
        if mode == 'comparison':
            return func(self._exact, *values)
        if mode == 'forward':
            if func is operator.pow:
                return self.power(*values)
            return type(self)(func(self._exact, *values))
        if mode == 'reverse':
            if func is operator.pow:
                return type(self)(*values).power(self)
            return type(self)(func(*values, self._exact))
        raise ValueError(f"Unknown operator mode {mode!r}")

    def __bool__(self) -> bool:
        """True if this value is not zero."""
        return self._exact != 0

    def __eq__(self, other) -> bool:
        """True if `other` has the same numerical value."""
        if not isinstance(other, algebraic.Real):
            return NotImplemented
        if isinstance(other, (float, decimal.Decimal, numpy.floating)):
            if not math.isfinite(other):
                return False
        return self._exact == exact(other)

    def __hash__(self) -> int:
        return hash(self._exact)

    def __str__(self) -> str:
        """The value in its narrowest written form."""
        if self._kind == 'decimal':
            return format(self._data, 'f')
        if self._kind == 'rational':
            return f"{self.numerator}/{self.denominator}"
        return str(self._data)


algebraic.Real.register(Value)


def narrow(arg: typing.Any) -> Value:
    """Create the narrowest exact representation of `arg`.

    Examples
    --------
    >>> narrow(decimal.Decimal('10.50')).kind
    'decimal'
    >>> narrow(decimal.Decimal('10.00')).kind
    'integer'
    """
    return Value(arg)


@functools.lru_cache(maxsize=None)
def pi(precision: int=None) -> decimal.Decimal:
    """Compute π to `precision` significant digits."""
    digits = precision or PRECISION
    with decimal.localcontext() as context:
        context.prec = digits + 2
        lasts, t, s, n, na, d, da = 0, decimal.Decimal(3), 3, 1, 0, 0, 24
        while s != lasts:
            lasts = s
            n, na = n + na, na + 8
            d, da = d + da, da + 32
            t = (t * n) / d
            s += t
    with decimal.localcontext() as context:
        context.prec = digits
        return +s


def rationalize(d: decimal.Decimal, precision: int=None) -> Value:
    """Round an inexact result to `precision` significant digits.

    If a ratio of integers whose denominator has at most a third as many
    digits as `precision` lies within rounding error of `d`, the result is
    that ratio, exactly. This recovers the starting value when an inexact
    conversion (e.g., from degrees to radians) is undone, so that ``'1/3'``
    comes back as 1/3 rather than as a truncated decimal.
    """
    digits = precision or PRECISION
    this = fractions.Fraction(d)
    if this == 0:
        return Value(0)
    candidate = this.limit_denominator(10 ** (digits // 3))
    if abs(candidate - this) <= abs(this) / 10 ** (digits - 2):
        logger.debug("Recovered %s from %s", Value(candidate), d)
        return Value(candidate)
    with decimal.localcontext() as context:
        context.prec = digits
        return Value(+d)


class Factor(iterables.ReprStrMixin):
    """An exact multiplicative factor of the form ``rational * π**pi``.

    Keeping the power of π separate from the rational coefficient allows
    conversions between angular units (e.g., degrees and radians) to compose
    without rounding. Only `evaluate` produces an inexact result.
    """

    def __init__(self, rational: typing.Any=1, pi: int=0) -> None:
        if isinstance(rational, Factor):
            self._rational = rational.rational
            self._pi = rational.pi + int(pi)
        else:
            self._rational = exact(rational)
            self._pi = int(pi)
        if self._rational == 0:
            raise ValueError("A factor must be nonzero") from None

    @property
    def rational(self) -> fractions.Fraction:
        """The rational coefficient."""
        return self._rational

    @property
    def pi(self) -> int:
        """The power of π."""
        return self._pi

    @property
    def is_exact(self) -> bool:
        """True if this factor does not involve π."""
        return self._pi == 0

    def is_one(self) -> bool:
        return self._pi == 0 and self._rational == 1

    def inverse(self):
        """The multiplicative inverse of this factor."""
        return self ** -1

    def evaluate(self, precision: int=None) -> Value:
        """Compute the value of this factor.

        The result is exact if this factor does not involve π. Otherwise, it
        has `precision` significant digits.
        """
        if self._pi == 0:
            return Value(self._rational)
        digits = precision or PRECISION
        logger.debug("Evaluating %s with %d digits", self, digits)
        with decimal.localcontext() as context:
            context.prec = digits
            coefficient = (
                decimal.Decimal(self._rational.numerator)
                / decimal.Decimal(self._rational.denominator)
            )
            return Value(coefficient * pi(digits) ** self._pi)

    def __mul__(self, other):
        """Called for self * other."""
        if isinstance(other, Factor):
            return Factor(self._rational * other.rational, self._pi + other.pi)
        if isinstance(other, algebraic.Real):
            return Factor(self._rational * exact(other), self._pi)
        return NotImplemented

    def __rmul__(self, other):
        """Called for other * self."""
        return self.__mul__(other)

    def __truediv__(self, other):
        """Called for self / other."""
        if isinstance(other, Factor):
            return Factor(self._rational / other.rational, self._pi - other.pi)
        if isinstance(other, algebraic.Real):
            return Factor(self._rational / exact(other), self._pi)
        return NotImplemented

    def __rtruediv__(self, other):
        """Called for other / self."""
        if isinstance(other, algebraic.Real):
            return Factor(exact(other) / self._rational, -self._pi)
        return NotImplemented

    def __pow__(self, n: int):
        """Called for self ** n, with integral n."""
        if not isinstance(n, numbers.Integral):
            return NotImplemented
        return Factor(self._rational ** int(n), self._pi * int(n))

    def __eq__(self, other) -> bool:
        if isinstance(other, Factor):
            return self._rational == other.rational and self._pi == other.pi
        if isinstance(other, algebraic.Real):
            return self._pi == 0 and self._rational == exact(other)
        return NotImplemented

    def __hash__(self) -> int:
        return hash((self._rational, self._pi))

    def __str__(self) -> str:
        """The exact form of this factor (e.g., '1/180·π')."""
        coefficient = str(Value(self._rational))
        if self._pi == 0:
            return coefficient
        angular = 'π' if self._pi == 1 else f"π^{self._pi}"
        if self._rational == 1:
            return angular
        return f"{coefficient}·{angular}"
