import re
import typing

from quantal.core import iterables
from quantal.core import measurable
from quantal.core import metric
from quantal.core import numerical


class ParseError(metric.UnitError, ValueError):
    """Cannot create a unit or quantity from the given string."""

    def __init__(self, string: str, reason: str=None) -> None:
        super().__init__(string)
        self.string = string
        """The part of the input at which parsing failed."""
        self.reason = reason

    def __str__(self) -> str:
        string = f"Could not parse {self.string!r}"
        if self.reason:
            return f"{string} ({self.reason})"
        return string


Lookup = typing.Callable[[str], typing.Optional[metric.Unit]]


class Iteration(iterables.ReprStrMixin):
    """An object that keeps track of parsing attributes."""

    __slots__ = ('string', 'operator', 'operand')

    def __init__(
        self,
        string: str,
        operator: str=None,
        operand: metric.Unit=None,
    ) -> None:
        self.string = string
        self.operator = operator
        self.operand = operand

    @property
    def _attrs(self):
        """Internal mapping of current attribute values."""
        return {name: getattr(self, name) for name in self.__slots__}

    def __str__(self):
        """A simplified representation of this object."""
        return ', '.join(f"{k}={v!r}" for k, v in self._attrs.items())


_SUPERSCRIPT_DIGITS = {metric.superscript(n): str(n) for n in range(10)}
_SUPERSCRIPT_SIGNS = {'⁺': '+', '⁻': '-'}


class Parser:
    """A tool for parsing unit expressions.

    The parser resolves each operand by looking up the longest prefix of the
    remaining string that names a known unit, so that adjacent symbols (e.g.,
    'kg桶') multiply. An operand may be a group in parentheses, or the literal
    '1' (e.g., in '1/s'). An operand may carry an integral exponent, written
    with superscript digits (e.g., 's²') or after the raising token (e.g.,
    's^2'), as long as the combination is not itself a known symbol. Each
    operator applies only to the operand that immediately follows it, so
    'kg/m·s' means '(kg/m)·s'.
    """

    def __init__(
        self,
        lookup: Lookup,
        multiply: typing.Iterable[str]=('·', '*'),
        divide: str='/',
        opening: str='(',
        closing: str=')',
        raising: str='^',
    ) -> None:
        """
        Parameters
        ----------
        lookup : callable
            A function that returns the unit with the given symbol or alias,
            or `None` if there is no such unit.

        multiply : iterable of strings, default=('·', '*')
            The tokens that represent multiplication.

        divide : string, default='/'
            The token that represents division.

        opening : string, default='('
            The token that represents an opening separator.

        closing : string, default=')'
            The token that represents a closing separator.

        raising : string, default='^'
            The token that represents raising to a power (exponentiation).
        """
        self.lookup = lookup
        self.tokens = {
            'multiply': tuple(multiply),
            'divide': divide,
            'opening': opening,
            'closing': closing,
            'raising': raising,
        }
        operators = ''.join(re.escape(t) for t in (*multiply, divide))
        self._operator = re.compile(fr'\s*([{operators}])\s*')
        self._adjacent = re.compile(r'\s+')
        self._raised = re.compile(fr'{re.escape(raising)}([-+]?\d+)')
        signs = ''.join(_SUPERSCRIPT_SIGNS)
        digits = ''.join(_SUPERSCRIPT_DIGITS)
        self._superscript = re.compile(fr'[{signs}]?[{digits}]+')

    def parse(self, string: str) -> metric.Unit:
        """Resolve the given string into a unit.

        An empty string represents the dimensionless unit.

        Raises
        ------
        `~symbolic.ParseError`
            The string is malformed or contains an unknown symbol.
        """
        return self._parse_group(string.strip())

    def _parse_group(self, string: str) -> metric.Unit:
        """Combine the operands of a single group."""
        result = metric.ONE
        current = Iteration(string)
        first = True
        while current.string:
            current = self._get_operator(current, first)
            current = self._get_operand(current)
            result = self._compute_operand(result, current)
            current = Iteration(current.string)
            first = False
        return result

    def _get_operator(self, current: Iteration, first: bool) -> Iteration:
        """Attempt to parse an operator from the current string."""
        if match := self._operator.match(current.string):
            if first:
                raise ParseError(current.string, "operator without operand")
            token = match.group(1)
            current.operator = (
                'divide' if token == self.tokens['divide'] else 'multiply'
            )
            remainder = current.string[match.end():]
            if not remainder:
                raise ParseError(current.string, "operator without operand")
            current.string = remainder
        elif match := self._adjacent.match(current.string):
            current.string = current.string[match.end():]
        return current

    def _get_operand(self, current: Iteration) -> Iteration:
        """Attempt to parse an operand from the current string."""
        string = current.string
        if string.startswith(self.tokens['opening']):
            end = self._find_closing(string)
            operand = self._parse_group(string[1:end].strip())
            remainder = string[end+1:]
        elif found := self._find_unit(string):
            operand, remainder = found
        elif string.startswith('1') and not string[1:2].isdigit():
            operand, remainder = metric.ONE, string[1:]
        else:
            raise ParseError(string, "unknown unit")
        exponent, remainder = self._get_exponent(remainder)
        current.operand = metric.power(operand, exponent)
        current.string = remainder
        return current

    def _find_closing(self, string: str) -> int:
        """Find the index of the token that closes the initial group."""
        depth = 0
        for i, c in enumerate(string):
            if c == self.tokens['opening']:
                depth += 1
            elif c == self.tokens['closing']:
                depth -= 1
                if depth == 0:
                    return i
        raise ParseError(string, "unmatched opening separator")

    def _find_unit(self, string: str):
        """Look up the longest initial substring that names a unit."""
        for n in range(len(string), 0, -1):
            if (unit := self.lookup(string[:n])) is not None:
                return unit, string[n:]

    def _get_exponent(self, string: str) -> typing.Tuple[int, str]:
        """Extract an integral exponent from the start of `string`."""
        if match := self._raised.match(string):
            return int(match.group(1)), string[match.end():]
        if match := self._superscript.match(string):
            text = ''.join(
                _SUPERSCRIPT_SIGNS.get(c) or _SUPERSCRIPT_DIGITS[c]
                for c in match.group(0)
            )
            return int(text), string[match.end():]
        return 1, string

    def _compute_operand(
        self,
        result: metric.Unit,
        current: Iteration,
    ) -> metric.Unit:
        """Apply the current operator to the running result."""
        if current.operator == 'divide':
            return metric.divide(result, current.operand)
        return metric.multiply(result, current.operand)


def parse_unit(string: str, lookup: Lookup) -> metric.Unit:
    """Parse a unit expression, using `lookup` to resolve symbols."""
    return Parser(lookup).parse(string)


def parse_quantity(string: str, lookup: Lookup) -> measurable.Quantity:
    """Parse a quantity, which may be a sum of terms in different units.

    The string must contain either a single number, which represents a
    dimensionless quantity, or one or more pairs of a number and a unit
    expression, separated by whitespace (e.g., '10 m' or '1 m 70 cm'). The
    result of a sum has the unit of the first term.

    Raises
    ------
    `~symbolic.ParseError`
        The string is malformed or contains an unknown symbol.
    `~metric.IncompatibleUnit`
        The terms of a sum have incompatible units.
    """
    tokens = string.split()
    if not tokens:
        raise ParseError(string, "empty quantity")
    if len(tokens) == 1:
        return measurable.Quantity(_parse_number(tokens[0]))
    if len(tokens) % 2:
        raise ParseError(tokens[-1], "number without unit")
    parser = Parser(lookup)
    terms = [
        measurable.Quantity(_parse_number(number), parser.parse(unit))
        for number, unit in zip(tokens[::2], tokens[1::2])
    ]
    result = terms[0]
    for term in terms[1:]:
        result = result.add(term)
    return result


def _parse_number(string: str) -> numerical.Value:
    """Helper for `parse_quantity`."""
    try:
        return numerical.Value.parse(string)
    except ValueError as err:
        raise ParseError(string, "not a number") from err
