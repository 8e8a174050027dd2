"""
Rules that decide whether two units may take part in the same operation.

Dimensional compatibility alone is too permissive for counting units: '个'
(pieces) and '框' (frames) are both dimensionless, but adding a number of one
to a number of the other is almost always a mistake. The functions in this
module therefore apply the following rules to a left unit, `u`, and a right
unit, `that`:

1. If `u` is dimensionless, the units are compatible if they have the same
   system unit. Otherwise, they must be identical, after which the product
   rules below still apply.
2. If both units are products, they must have the same number of factors, and
   each factor of `u` that is dimensionless must be identical to the
   corresponding factor of `that`.
3. If exactly one unit is a product, the units must be identical.
4. In all other cases, the units must have the same physical dimensions.

Identity means equal canonical strings. A unit that passes these rules may
still fail to convert (see `~conversion.converter`).
"""

import typing

from quantal.core import metric


def check(
    u: metric.Unit,
    that: metric.Unit,
) -> typing.Optional[metric.IncompatibleUnit]:
    """Check whether `that` may combine with `u`.

    Returns
    -------
    `~metric.IncompatibleUnit` or `None`
        The failure, if the units may not combine, or `None` if they may.
        This function does not raise the exception; see `require`.
    """
    if u.dimensionless:
        if u.system_unit == that.system_unit:
            return None
        if error := _identity_error(u, that):
            return error
    is_product = (
        isinstance(u, metric.ProductUnit),
        isinstance(that, metric.ProductUnit),
    )
    if all(is_product):
        if len(u) != len(that):
            return metric.IncompatibleUnit(u, that)
        for (u0, _), (u1, _) in zip(u.factors, that.factors):
            if u0.dimensionless and (error := _identity_error(u0, u1)):
                return error
    elif any(is_product):
        if error := _identity_error(u, that):
            return error
    if not u.is_compatible(that):
        return metric.IncompatibleUnit(u, that)


def _identity_error(u: metric.Unit, that: metric.Unit):
    """Check whether two units are identical."""
    if not u.is_compatible(that) or str(u) != str(that):
        return metric.IncompatibleUnit(u, that)


def require(u: metric.Unit, that: metric.Unit) -> None:
    """Raise an exception if `that` may not combine with `u`.

    Raises
    ------
    `~metric.IncompatibleUnit`
        The units may not combine, according to `check`.
    """
    if error := check(u, that):
        raise error


def compatible(u: metric.Unit, that: metric.Unit) -> bool:
    """True if `that` may combine with `u`."""
    return check(u, that) is None
