from .uri import HZURI, HZJdbcUrl, IndexedValue, PropertyValue, ScalarValue
__version__ = '1.0.0'
__all__ = ['HZURI', 'HZJdbcUrl', 'IndexedValue', 'PropertyValue', 'ScalarValue', '__version__']
