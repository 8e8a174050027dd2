import decimal
import fractions
import math

import numpy
import pytest

from quantal.core import numerical
from quantal.core.numerical import Factor, Value


@pytest.mark.quantity
def test_value_kinds():
    """Each value should take its narrowest exact form."""
    cases = [
        (3, 'integer', '3'),
        ('0.5', 'decimal', '0.5'),
        ('1/3', 'rational', '1/3'),
        ('4/2', 'integer', '2'),
        ('1.5e-3', 'decimal', '0.0015'),
        (decimal.Decimal('10.00'), 'integer', '10'),
        (decimal.Decimal('10.50'), 'decimal', '10.5'),
        (fractions.Fraction(3, 8), 'decimal', '0.375'),
        (0.1, 'decimal', '0.1'),
        (numpy.int64(7), 'integer', '7'),
        (numpy.float64(2.25), 'decimal', '2.25'),
    ]
    for arg, kind, string in cases:
        value = Value(arg)
        assert value.kind == kind, arg
        assert str(value) == string, arg


@pytest.mark.quantity
def test_narrow():
    """Narrowing an exact value should not change it."""
    third = numerical.narrow('1/3')
    again = numerical.narrow(third)
    assert again == third
    assert again.kind == 'rational'
    assert numerical.narrow(decimal.Decimal('10.00')).kind == 'integer'


@pytest.mark.quantity
def test_value_arithmetic():
    """Arithmetic on values should be exact."""
    assert Value(0.1) + Value(0.2) == Value('0.3')
    assert Value(0.1) + Value(0.2) == 0.3
    assert str(Value(1) / 3) == '1/3'
    assert (Value(1) / 3 * 3).kind == 'integer'
    assert Value('0.5') * 4 == 2
    assert (Value('0.5') * 4).kind == 'integer'
    assert Value(5) - 7 == -2
    assert 10 - Value(4) == 6
    assert 3 / Value(4) == Value('0.75')
    assert Value(2).add(fractions.Fraction(1, 2)) == Value('2.5')
    assert -Value('1/3') == Value('-1/3')
    assert abs(Value(-4)) == 4
    assert Value(-4).abs() == 4
    assert Value(4).negate() == -4


@pytest.mark.quantity
def test_value_division_by_zero():
    """Dividing by zero should raise the standard exception."""
    with pytest.raises(ZeroDivisionError):
        Value(1) / Value(0)
    with pytest.raises(ZeroDivisionError):
        Value(0).reciprocal()
    with pytest.raises(ZeroDivisionError):
        Value(5).divide_and_remainder(0)


@pytest.mark.quantity
def test_divide_and_remainder():
    """The quotient should round toward zero."""
    assert Value(-7).divide_and_remainder(2) == (-3, -1)
    assert Value(7).divide_and_remainder(2) == (3, 1)
    q, r = Value('7.5').divide_and_remainder(2)
    assert q == 3 and r == Value('1.5')


@pytest.mark.quantity
def test_value_power():
    """Values support integral exponents only."""
    assert Value(2).power(10) == 1024
    assert Value(2) ** -1 == Value('0.5')
    assert Value('2/3') ** 2 == Value('4/9')
    assert 2 ** Value(3) == 8
    with pytest.raises(ValueError):
        Value(2).power('1/2')
    with pytest.raises(ValueError):
        Value(2) ** 0.5


@pytest.mark.quantity
def test_exp_and_log():
    """Transcendental functions should use the requested precision."""
    assert str(Value(1).exp(precision=10)) == '2.718281828'
    assert Value(1).log().is_zero()
    assert str(Value(10).log(precision=5)) == '2.3026'
    with pytest.raises(ValueError):
        Value(0).log()
    with pytest.raises(ValueError):
        Value(-1).log()


@pytest.mark.quantity
def test_invalid_values():
    """Attempts to create a value from non-numbers should fail."""
    for arg in ('abc', '1/0', '1..2', '', '1 2'):
        with pytest.raises(ValueError):
            Value(arg)
    for arg in (float('inf'), float('nan'), decimal.Decimal('NaN')):
        with pytest.raises(ValueError):
            Value(arg)
    with pytest.raises(TypeError):
        Value(None)
    with pytest.raises(TypeError):
        Value([1])


@pytest.mark.quantity
def test_value_properties():
    """Check the exact and decimal properties of a value."""
    v = Value('1.250')
    assert v.scale == 2
    assert v.exact == fractions.Fraction(5, 4)
    assert v.numerator == 5
    assert v.denominator == 4
    assert Value(12).scale == 0
    assert Value('1/3').scale is None
    assert Value('1/3').to_decimal(5) == decimal.Decimal('0.33333')
    assert Value('0.125').to_decimal() == decimal.Decimal('0.125')


@pytest.mark.quantity
def test_value_comparison():
    """Values should compare numerically with other reals."""
    assert Value(1) < 2
    assert Value('1/3') > Value('0.3')
    assert Value(2) >= 2.0
    assert Value(1).compare(2) == -1
    assert Value(2).compare('2.0') == 0
    assert Value(3).compare(Value('5/2')) == 1
    assert Value(1) != 'a'
    assert not Value(0)
    assert Value('0.001')
    assert Value(1).is_one()
    assert Value('0.5').is_less_than_one()
    assert not Value('0.5').is_integer()


@pytest.mark.quantity
def test_value_hash_and_cast():
    """Equal numbers should hash alike, and casts should work."""
    assert hash(Value('0.5')) == hash(fractions.Fraction(1, 2)) == hash(0.5)
    assert len({Value('1.0'), Value(1), Value('2/2')}) == 1
    assert int(Value('7/2')) == 3
    assert float(Value('1/4')) == 0.25
    assert math.floor(Value('-2.5')) == -3
    assert math.ceil(Value('2.1')) == 3


@pytest.mark.unit
def test_factor_arithmetic():
    """Factors should keep powers of π separate from the coefficient."""
    assert Factor(2) * Factor(3, 1) == Factor(6, 1)
    assert Factor(2, 1) / Factor(4, 1) == Factor('1/2')
    assert Factor(2) * 5 == Factor(10)
    assert 1 / Factor(4) == Factor('1/4')
    assert Factor(3, 1) ** 2 == Factor(9, 2)
    assert Factor('1/180', 1).inverse() == Factor(180, -1)
    assert Factor(2) == 2
    assert Factor(1, 1) != 1
    assert Factor(1).is_one()
    assert not Factor(1, 1).is_exact
    assert hash(Factor('0.5', 1)) == hash(Factor('1/2', 1))
    with pytest.raises(ValueError):
        Factor(0)


@pytest.mark.unit
def test_factor_string():
    """Check the exact written form of a factor."""
    assert str(Factor('1/180', 1)) == '1/180·π'
    assert str(Factor(1, 1)) == 'π'
    assert str(Factor(1, 2)) == 'π^2'
    assert str(Factor(3)) == '3'
    assert str(Factor('0.01')) == '0.01'


@pytest.mark.unit
def test_factor_evaluate():
    """Only factors involving π should be inexact."""
    assert Factor(3).evaluate() == 3
    assert Factor('1/3').evaluate().kind == 'rational'
    assert str(Factor(1, 1).evaluate(20)) == '3.1415926535897932385'
    assert str(numerical.pi(20)) == '3.1415926535897932385'
    degree = Factor('1/180', 1).evaluate()
    assert abs(float(degree) - math.pi / 180) < 1e-15


@pytest.mark.unit
def test_rationalize():
    """Recover short fractions from rounded results, but nothing else."""
    third = decimal.Decimal('0.3333333333333333333333333333333333')
    assert numerical.rationalize(third) == Value('1/3')
    nearly = decimal.Decimal('6.999999999999999999999999999999999')
    assert numerical.rationalize(nearly) == 7
    assert numerical.rationalize(nearly).is_integer()
    assert numerical.rationalize(decimal.Decimal(0)) == 0
    value = numerical.rationalize(numerical.pi(40), 34)
    assert str(value) == '3.141592653589793238462643383279503'
    assert numerical.rationalize(decimal.Decimal('0.5'), 10) == Value('1/2')
