import threading
import typing

from quantal.core import iterables
from quantal.core import measurable
from quantal.core import metric
from quantal.core import symbolic
from quantal.logger import logger


class DuplicateUnitDefinition(metric.UnitError):
    """A symbol or alias already refers to a registered unit."""

    def __init__(self, unit: metric.Unit) -> None:
        super().__init__(unit)
        self.unit = unit

    def __str__(self) -> str:
        return f"[{self.unit}] duplicated"


class UnregisteredUnit(metric.UnitError):
    """The registry does not contain a given unit."""

    def __init__(self, unit: metric.Unit, message: str=None) -> None:
        super().__init__(unit)
        self.unit = unit
        self.message = message

    def __str__(self) -> str:
        return self.message or f"[{self.unit}] is illegal"


class Registry(iterables.ReprStrMixin):
    """The units that an application knows by symbol or alias.

    A registry maps symbols and aliases (e.g., 'kg' and '千克') to units and
    records every unit added to it. It also parses unit expressions and
    quantities in terms of the units it knows. Registration is append-only:
    adding a unit or alias whose key is already in use fails instead of
    replacing the existing entry. Writes hold a lock, so concurrent writers
    cannot both claim the same key; reads do not.
    """

    def __init__(self, cache: bool=False) -> None:
        """
        Parameters
        ----------
        cache : bool, default=False
            The default caching behavior of `~Registry.parse`.
        """
        self.cache = cache
        """True if `parse` should reuse the units of previous calls."""
        self._symbols = {}
        self._names = {}
        self._units = {}
        self._parsed = {}
        self._lock = threading.RLock()

    def symbol_for(self, symbol: str) -> typing.Optional[metric.Unit]:
        """Get the unit with the given symbol, if any.

        The empty string denotes the dimensionless unit, `~metric.ONE`.
        """
        if not symbol:
            return metric.ONE
        return self._symbols.get(symbol)

    def name_for(self, alias: str) -> typing.Optional[metric.Unit]:
        """Get the unit with the given alias, if any."""
        return self._names.get(alias)

    def lookup(self, string: str) -> typing.Optional[metric.Unit]:
        """Get the unit with the given symbol or alias, if any.

        Symbols take precedence over aliases.
        """
        unit = self._symbols.get(string)
        if unit is None:
            return self._names.get(string)
        return unit

    def get_unit(self, string: str) -> typing.Optional[metric.Unit]:
        """Get the registered unit whose canonical string is `string`."""
        return self._units.get(string)

    def units(self) -> typing.Tuple[metric.Unit, ...]:
        """All registered units, in order of registration."""
        return tuple(self._units.values())

    def add_unit(self, unit: metric.Unit, alias: str=None) -> metric.Unit:
        """Register `unit`, along with an optional alias.

        This method registers the symbol of `unit`, if it has one, and
        `alias`, if given. It registers both or neither.

        Returns
        -------
        `~metric.Unit`
            The newly registered unit.

        Raises
        ------
        `~registry.DuplicateUnitDefinition`
            The symbol or alias already refers to a registered unit.
        """
        with self._lock:
            symbol = unit.symbol
            if symbol and symbol in self._symbols:
                raise DuplicateUnitDefinition(self._symbols[symbol])
            if alias and alias in self._names:
                raise DuplicateUnitDefinition(self._names[alias])
            if symbol:
                self._symbols[symbol] = unit
            if alias:
                self._names[alias] = unit
            self._units.setdefault(str(unit), unit)
        logger.debug("Registered unit %r (alias %r)", unit, alias)
        return unit

    def add_alias(self, unit: metric.Unit, alias: str) -> metric.Unit:
        """Register an alternative name for a registered unit.

        An empty alias leaves the registry unchanged.

        Raises
        ------
        `~registry.UnregisteredUnit`
            The registry does not contain `unit`.
        `~registry.DuplicateUnitDefinition`
            The alias already refers to a registered unit.
        """
        if str(unit) not in self._units:
            raise UnregisteredUnit(unit, "unit not exist.")
        if not alias:
            return unit
        with self._lock:
            if alias in self._names:
                raise DuplicateUnitDefinition(self._names[alias])
            self._names[alias] = unit
        logger.debug("Registered alias %r for %r", alias, unit)
        return unit

    def add_sku_unit(self, symbol: str, name: str) -> metric.Unit:
        """Register a new counting unit (e.g., '桶') with an alias."""
        return self.add_unit(metric.BaseUnit(symbol, name), name)

    def check_registered(
        self,
        unit: metric.Unit,
    ) -> typing.Optional[UnregisteredUnit]:
        """Check whether this registry contains `unit`.

        Returns
        -------
        `~registry.UnregisteredUnit` or `None`
            The failure, if this registry does not contain `unit`, or `None`
            if it does.
        """
        if self.get_unit(str(unit)) is None:
            return UnregisteredUnit(unit)

    def parse(self, expression: str, cache: bool=None) -> metric.Unit:
        """Convert a unit expression (e.g., 'kg/桶') into a unit.

        Parameters
        ----------
        expression : string
            The unit expression. See `~symbolic.Parser` for syntax.

        cache : bool, optional
            If true, reuse the result of a previous call with the same
            expression, and store the result of a new one. The default value
            is the `cache` attribute of this instance.

        Raises
        ------
        `~symbolic.ParseError`
            The expression is malformed or contains an unknown symbol.
        """
        if cache is None:
            cache = self.cache
        if cache and expression in self._parsed:
            logger.debug("Found %r in parse cache", expression)
            return self._parsed[expression]
        unit = symbolic.parse_unit(expression, self.lookup)
        if cache:
            self._parsed[expression] = unit
        return unit

    def quantity(self, string: str) -> measurable.Quantity:
        """Convert a string (e.g., '1 m 70 cm') into a quantity.

        See `~symbolic.parse_quantity`.
        """
        return symbolic.parse_quantity(string, self.lookup)

    def __contains__(self, unit: typing.Any) -> bool:
        """True if this registry contains the given unit."""
        return str(unit) in self._units

    def __len__(self) -> int:
        """The number of registered units."""
        return len(self._units)

    def __iter__(self) -> typing.Iterator[metric.Unit]:
        """Iterate over registered units."""
        return iter(self.units())

    def __str__(self) -> str:
        return f"{len(self)} units, {len(self._names)} aliases"
