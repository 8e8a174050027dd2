import pytest

from quantal.core import compatibility
from quantal.core import metric


@pytest.mark.unit
def test_counting_units(units):
    """Different counting units may not combine."""
    error = compatibility.check(units.lookup('个'), units.lookup('框'))
    assert isinstance(error, metric.IncompatibleUnit)
    assert str(error) == '[个] is not [框]'
    assert compatibility.check(units.lookup('个'), units.lookup('个')) is None
    error = compatibility.check(units.lookup('个'), units.lookup('元'))
    assert str(error) == '[个] is not [元]'


@pytest.mark.unit
def test_dimensionless_system_unit(units):
    """Dimensionless units with the same system unit may combine."""
    assert compatibility.compatible(units.lookup('rad'), units.lookup('°'))
    assert compatibility.compatible(units.lookup('元'), units.lookup('万元'))
    assert compatibility.compatible(metric.ONE, units.parse('m/m'))
    assert not compatibility.compatible(metric.ONE, units.lookup('个'))


@pytest.mark.unit
def test_dimensionless_products(units):
    """Dimensionless products must have identical factors."""
    error = compatibility.check(units.parse('元/个'), units.parse('元/框'))
    assert str(error) == '[元/个] is not [元/框]'
    assert compatibility.compatible(units.parse('元/个'), units.parse('元/个'))


@pytest.mark.unit
def test_products(units):
    """Products must match factor by factor."""
    assert compatibility.compatible(
        units.parse('元/m²'),
        units.parse('元/平方厘米'),
    )
    assert compatibility.compatible(
        units.parse('kg/桶'),
        units.parse('g/桶'),
    )
    error = compatibility.check(units.parse('kg/桶'), units.parse('kg/个'))
    assert str(error) == '[桶] is not [个]'
    error = compatibility.check(units.parse('kg/m²'), units.parse('kg/cm/m'))
    assert isinstance(error, metric.IncompatibleUnit)


@pytest.mark.unit
def test_one_product(units):
    """A product and a non-product must be identical."""
    assert compatibility.compatible(
        units.parse('m^2'),
        units.lookup('m²'),
    )
    error = compatibility.check(units.parse('kg·m'), units.lookup('m'))
    assert str(error) == '[kg·m] is not [m]'
    error = compatibility.check(units.lookup('l'), units.parse('m^3'))
    assert str(error) == '[l] is not [m³]'


@pytest.mark.unit
def test_dimensions(units):
    """Other units need only have the same dimensions."""
    assert compatibility.compatible(units.lookup('m'), units.lookup('cm'))
    assert compatibility.compatible(units.lookup('hour'), units.lookup('人时'))
    error = compatibility.check(units.lookup('m'), units.lookup('s'))
    assert str(error) == '[m] is not [s]'


@pytest.mark.unit
def test_require(units):
    """Check the version that raises an exception."""
    compatibility.require(units.lookup('m'), units.lookup('cm'))
    with pytest.raises(metric.IncompatibleUnit):
        compatibility.require(units.lookup('个'), units.lookup('框'))
