"""
Predefined units for construction, inventory, and pricing applications.

The tables in this module define units relative to one another. The function
`registry` reads them, in order, into a new `~registry.Registry`, so each
derived unit may refer to any unit defined above it.
"""

import quantal
from quantal.core import metric
from quantal.core import numerical
from quantal.core.registry import Registry


_base_units = [
    {
        'symbol': 'm',
        'name': 'metre',
        'dimension': 'L',
        'alias': '米',
    },
    {
        'symbol': 'kg',
        'name': 'kilogram',
        'dimension': 'M',
        'alias': '千克',
    },
    {
        'symbol': 's',
        'name': 'second',
        'dimension': 'T',
        'alias': '秒钟',
    },
    {
        'symbol': 'K',
        'name': 'kelvin',
        'dimension': 'Θ',
    },
    {
        'symbol': 'A',
        'name': 'ampere',
        'dimension': 'I',
    },
    {
        'symbol': 'mol',
        'name': 'mole',
        'dimension': 'N',
    },
    {
        'symbol': 'cd',
        'name': 'candela',
        'dimension': 'J',
    },
    {
        'symbol': 'rad',
        'name': 'radian',
    },
    {
        'symbol': '延米',
        'name': '延米',
        'dimension': 'L',
        'alias': '延米',
    },
    {
        'symbol': 'man',
        'name': '人',
        'alias': '人',
    },
    {
        'symbol': '元',
        'name': '元',
        'alias': '元',
    },
    {
        'symbol': '未知',
        'name': '未知',
        'alias': '未知',
    },
]


# The name of each derived unit is also its alias.
_derived_units = [
    {
        'symbol': 'cm',
        'name': '厘米',
        'parent': 'm',
        'factor': '1/100',
    },
    {
        'symbol': 'mm',
        'name': '毫米',
        'parent': 'm',
        'factor': '1/1000',
    },
    {
        'symbol': 'm²',
        'name': '平米',
        'parent': 'm^2',
    },
    {
        'symbol': 'cm²',
        'name': '平方厘米',
        'parent': 'm^2',
        'factor': '1/10000',
    },
    {
        'symbol': 'mm²',
        'name': '平方毫米',
        'parent': 'm^2',
        'factor': '1/1000000',
    },
    {
        'symbol': 'm³',
        'name': '立方米',
        'parent': 'm^3',
    },
    {
        'symbol': 'cm³',
        'name': '立方厘米',
        'parent': 'm^3',
        'factor': '1/1000000',
    },
    {
        'symbol': 'mm³',
        'name': '立方毫米',
        'parent': 'm^3',
        'factor': '1/1000000000',
    },
    {
        'symbol': 'l',
        'name': '升',
        'parent': 'm^3',
        'factor': '1/1000',
    },
    {
        'symbol': 'ml',
        'name': '毫升',
        'parent': 'l',
        'factor': '1/1000',
    },
    {
        'symbol': 'g',
        'name': '克',
        'parent': 'kg',
        'factor': '1/1000',
    },
    {
        'symbol': '℃',
        'name': '摄氏度',
        'parent': 'K',
        'offset': '273.15',
    },
    {
        'symbol': '°',
        'name': '角度',
        'parent': 'rad',
        'factor': '1/180',
        'pi': 1,
    },
    {
        'symbol': 'min',
        'name': '分钟',
        'parent': 's',
        'factor': '60',
    },
    {
        'symbol': 'hour',
        'name': '小时',
        'parent': 's',
        'factor': '3600',
    },
    {
        'symbol': 'day',
        'name': '天',
        'parent': 's',
        'factor': '86400',
    },
    {
        'symbol': '人时',
        'name': '人时',
        'parent': 'man·hour',
    },
    {
        'symbol': '人天',
        'name': '人天',
        'parent': '人时',
        'factor': '8',
    },
    {
        'symbol': '万元',
        'name': '万元',
        'parent': '元',
        'factor': '10000',
    },
]


SKU_UNITS = (
    '根', '片', '条', '袋', '框', '套', '樘', '个', '台',
    '件', '只', '项', '扇', '卷', '桶', '盒', '张', '捆',
    '把', '架', '块', '瓶', '支', '箱', '付', '对', '次',
)
"""Symbols of the predefined counting units."""


def registry(settings: quantal.Settings=None) -> Registry:
    """Create a new registry that contains all predefined units.

    Parameters
    ----------
    settings : `~quantal.Settings`, optional
        Package settings. This function reads the default caching behavior of
        the new registry from the 'cache' parameter. The default is the result
        of `~quantal.Settings()`.
    """
    if settings is None:
        settings = quantal.Settings()
    units = Registry(cache=settings.getboolean('cache'))
    units.add_unit(metric.ONE)
    for entry in _base_units:
        base = metric.BaseUnit(
            entry['symbol'],
            name=entry['name'],
            dimension=entry.get('dimension'),
        )
        units.add_unit(base, entry.get('alias'))
    for entry in _derived_units:
        factor = numerical.Factor(entry.get('factor', 1), entry.get('pi', 0))
        derived = metric.transform(
            units.parse(entry['parent'], cache=False),
            factor=factor,
            offset=entry.get('offset', 0),
            symbol=entry['symbol'],
            name=entry['name'],
        )
        units.add_unit(derived, entry['name'])
    for symbol in SKU_UNITS:
        units.add_sku_unit(symbol, symbol)
    return units
