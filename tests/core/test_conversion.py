import math

import pytest

from quantal.core import conversion
from quantal.core import metric
from quantal.core import numerical
from quantal.core.conversion import Converter


@pytest.mark.unit
def test_converter_composition():
    """Composing affine converters should be exact."""
    c0 = Converter(2, 3)
    c1 = Converter(5, 7)
    assert c0.then(c1) == Converter(10, 22)
    assert c0(5) == 13
    assert c0.inverse() == Converter('1/2', '-3/2')
    assert c0.inverse()(13) == 5
    assert c0.then(c0.inverse()).is_identity
    assert Converter(4) ** 2 == Converter(16)
    assert Converter(4) ** -1 == Converter('1/4')
    assert c0.linear == Converter(2)
    assert not c0.is_linear
    assert conversion.IDENTITY.is_identity
    assert str(c0) == 'x * 2 + 3'


@pytest.mark.unit
def test_converter_errors():
    """Offsets may not combine with factors of π."""
    angular = Converter(numerical.Factor(1, 1))
    with pytest.raises(ValueError):
        Converter(1, 5).then(angular)
    with pytest.raises(ValueError):
        Converter(numerical.Factor(2, 1), 5).inverse()
    with pytest.raises(ValueError):
        Converter(1, 5) ** 2
    # A linear converter may still precede one with π.
    assert Converter(2).then(angular) == Converter(numerical.Factor(2, 1))


@pytest.mark.unit
def test_temperature(units):
    """Convert between affine temperature units."""
    celsius = units.symbol_for('℃')
    kelvin = units.symbol_for('K')
    assert conversion.convert(0, celsius, kelvin) == numerical.Value('273.15')
    assert conversion.convert(0, kelvin, celsius) == numerical.Value('-273.15')
    assert conversion.convert(100, celsius, kelvin) == numerical.Value('373.15')
    assert conversion.system_converter(celsius) == Converter(1, '273.15')


@pytest.mark.unit
def test_linear(units):
    """Convert between linearly related units."""
    cases = [
        ('m', 'cm', 1, 100),
        ('cm', 'mm', '2.5', 25),
        ('ml', 'm³', 1, '0.000001'),
        ('cm³', 'ml', 1, 1),
        ('day', 'min', 1, 1440),
        ('人天', '人时', 1, 8),
        ('万元', '元', '1.5', 15000),
        ('g', 'kg', 250, '0.25'),
        ('平方毫米', '平方厘米', 100, 1),
    ]
    for source, target, value, expected in cases:
        result = conversion.convert(
            value,
            units.lookup(source),
            units.lookup(target),
        )
        assert result == numerical.Value(expected), (source, target)


@pytest.mark.unit
def test_round_trip(units):
    """Converting to another unit and back should be exact."""
    pairs = [
        ('m', 'cm'),
        ('cm²', 'mm²'),
        ('l', 'ml'),
        ('g', 'kg'),
        ('℃', 'K'),
        ('day', 'min'),
        ('人天', '人时'),
        ('万元', '元'),
        ('mm³', 'l'),
    ]
    x = numerical.Value('12.345')
    for a, b in pairs:
        u0, u1 = units.lookup(a), units.lookup(b)
        there = conversion.convert(x, u0, u1)
        assert conversion.convert(there, u1, u0) == x, (a, b)


@pytest.mark.unit
def test_identity(units):
    """Converting to the same unit should not change a value."""
    kg = units.symbol_for('kg')
    assert conversion.converter(kg, kg) is conversion.IDENTITY
    square = units.parse('m^2')
    assert conversion.converter(square, units.symbol_for('m²')).is_identity


@pytest.mark.unit
def test_products(units):
    """Convert between products with matching factors."""
    source = units.parse('元/平方厘米')
    target = units.parse('元/m²')
    assert conversion.convert('0.0001', source, target) == 1
    speed = conversion.converter(units.parse('m/s'), units.parse('cm/min'))
    assert speed == Converter(6000)


@pytest.mark.unit
def test_degrees(units):
    """Angular conversions should keep π exact until evaluation."""
    degree = units.symbol_for('°')
    radian = units.symbol_for('rad')
    system = conversion.system_converter(degree)
    assert system.scale == numerical.Factor('1/180', 1)
    result = conversion.convert(180, degree, radian)
    assert abs(float(result) - math.pi) < 1e-12
    assert conversion.converter(radian, degree).scale == numerical.Factor(
        180, -1
    )


@pytest.mark.unit
def test_conversion_errors(units):
    """Conversions between unrelated units should fail."""
    with pytest.raises(metric.IncompatibleUnit):
        conversion.converter(units.lookup('m'), units.lookup('s'))
    with pytest.raises(metric.UnconvertibleUnit):
        conversion.converter(units.lookup('个'), units.lookup('框'))
    with pytest.raises(metric.UnconvertibleUnit):
        conversion.converter(units.parse('kg·m/s'), units.parse('m·kg/s'))


@pytest.mark.unit
def test_angular_round_trip(units):
    """Angular conversions should also round-trip exactly."""
    degree = units.symbol_for('°')
    radian = units.symbol_for('rad')
    for value in ('7', '1/3', '90', '359.99', '30', '-45.5', '0'):
        x = numerical.Value(value)
        there = conversion.convert(x, degree, radian)
        assert conversion.convert(there, radian, degree) == x, value
        back = conversion.convert(x, radian, degree)
        assert conversion.convert(back, degree, radian) == x, value
