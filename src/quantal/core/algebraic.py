import abc
import decimal
import math
import numbers
import operator as standard
import typing

import numpy


class Real(abc.ABC):
    """Abstract base class for objects that behave like a single real number.

    This class is similar to ``numbers.Real``, except that it also admits
    ``decimal.Decimal`` and numpy scalar types, which ``numbers.Real`` does
    not claim. Classes register with it rather than inherit from it.
    """

    __slots__ = ()


Real.register(numbers.Real)
Real.register(decimal.Decimal)
Real.register(numpy.number)


class Quantity(abc.ABC):
    """ABC for algebraic quantities.

    Concrete subclasses must define the built-in `__eq__` method and an
    `implement` method that computes the result of a given operation on specific
    operands. Operator mixin classes can leverage this class to programmatically
    implement operator methods. Concrete subclasses of this class are always
    true in a boolean sense.

    Instances are immutable, so this class does not define in-place operators;
    augmented assignment (e.g., ``x += y``) binds the name to a new object.
    """

    def __bool__(self) -> bool:
        """Always true for a valid instance."""
        return True

    def __abs__(self):
        """Called for abs(self)."""
        return self.implement(abs, 'arithmetic')

    def __pos__(self):
        """Called for +self."""
        return self.implement(standard.pos, 'arithmetic')

    def __neg__(self):
        """Called for -self."""
        return self.implement(standard.neg, 'arithmetic')

    def __ne__(self, other) -> bool:
        """Called for self != other."""
        return not self == other

    def __lt__(self, other) -> bool:
        """Called for self < other."""
        return self.implement(standard.lt, 'comparison', other)

    def __le__(self, other) -> bool:
        """Called for self <= other."""
        return self.implement(standard.le, 'comparison', other)

    def __gt__(self, other) -> bool:
        """Called for self > other."""
        return self.implement(standard.gt, 'comparison', other)

    def __ge__(self, other) -> bool:
        """Called for self >= other."""
        return self.implement(standard.ge, 'comparison', other)

    def __add__(self, other):
        """Called for self + other."""
        return self.implement(standard.add, 'forward', other)

    def __radd__(self, other):
        """Called for other + self."""
        return self.implement(standard.add, 'reverse', other)

    def __sub__(self, other):
        """Called for self - other."""
        return self.implement(standard.sub, 'forward', other)

    def __rsub__(self, other):
        """Called for other - self."""
        return self.implement(standard.sub, 'reverse', other)

    def __mul__(self, other):
        """Called for self * other."""
        return self.implement(standard.mul, 'forward', other)

    def __rmul__(self, other):
        """Called for other * self."""
        return self.implement(standard.mul, 'reverse', other)

    def __truediv__(self, other):
        """Called for self / other."""
        return self.implement(standard.truediv, 'forward', other)

    def __rtruediv__(self, other):
        """Called for other / self."""
        return self.implement(standard.truediv, 'reverse', other)

    def __pow__(self, other):
        """Called for self ** other."""
        return self.implement(standard.pow, 'forward', other)

    def __rpow__(self, other):
        """Called for other ** self."""
        return self.implement(standard.pow, 'reverse', other)

    @abc.abstractmethod
    def implement(self, func: typing.Callable, mode: str, *others, **kwargs):
        """Implement a standard operator."""
        pass


class Scalar(Quantity):
    """ABC for single-valued algebraic quantities.

    This class extends `~algebraic.Quantity` to define two numeric cast
    operators (`__int__` and `__float__`) and four unary arithmetic operators
    (`__round__`, `__floor__`, `__ceil__`, and `__trunc__`) in terms of the
    abstract method `implement`.
    """

    def __int__(self):
        """Called for int(self)."""
        return self.implement(int, 'cast')

    def __float__(self):
        """Called for float(self)."""
        return self.implement(float, 'cast')

    def __round__(self, ndigits: int=None):
        """Called for round(self)."""
        if ndigits is None:
            return self.implement(round, 'arithmetic')
        return self.implement(round, 'arithmetic', ndigits)

    def __floor__(self):
        """Called for math.floor(self)."""
        return self.implement(math.floor, 'arithmetic')

    def __ceil__(self):
        """Called for math.ceil(self)."""
        return self.implement(math.ceil, 'arithmetic')

    def __trunc__(self):
        """Called for math.trunc(self)."""
        return self.implement(math.trunc, 'arithmetic')
