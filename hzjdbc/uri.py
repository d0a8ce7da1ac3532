import re
import logging
import urllib.parse
from types import MappingProxyType
from typing import Any, Dict, Iterator, Mapping, Optional, Tuple, Union
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)

SCHEME_PREFIX = 'jdbc:hazelcast://'
SENSITIVE_MARKERS = ('password', 'token', 'secret')

# ASCII \S: only the ASCII whitespace set ends a segment.
JDBC_URL_PATTERN = re.compile('jdbc:hazelcast://(?P<authority>\\S+?(?=/))/(?P<schema>\\S+?)(\\?(?P<parameters>\\S*))?', re.ASCII)
KEY_VALUE_PROPERTY = re.compile('(?P<property>\\S+)\\[(?P<key>\\S+)\\]', re.ASCII)


def is_sensitive(name: str) -> bool:
    lowered = name.lower()
    return any((marker in lowered for marker in SENSITIVE_MARKERS))


@dataclass(frozen=True)
class ScalarValue:
    value: str
    kind = 'scalar'

    def as_property_value(self) -> str:
        return self.value


@dataclass(frozen=True)
class IndexedValue:
    entries: Tuple[Tuple[str, str], ...] = ()
    kind = 'indexed'

    def get(self, subkey: str) -> Optional[str]:
        for k, v in self.entries:
            if k == subkey:
                return v
        return None

    def as_dict(self) -> Dict[str, str]:
        return dict(self.entries)

    def as_property_value(self) -> str:
        return ','.join((f'{k}={v}' for k, v in self.entries))


PropertyValue = Union[ScalarValue, IndexedValue]


@dataclass(frozen=True)
class HZJdbcUrl:
    authorities: Tuple[str, ...]
    schema: str
    raw_url: str
    raw_authority: str
    properties: Mapping[str, PropertyValue] = field(default_factory=lambda: MappingProxyType({}))
    # unhashable: properties is a mappingproxy
    __hash__ = None

    def get_property(self, key: str) -> Optional[str]:
        value = self.properties.get(key)
        if value is None:
            return None
        return value.as_property_value()

    @property
    def connection_string(self) -> str:
        params = []
        for name, value in self.properties.items():
            if isinstance(value, IndexedValue):
                for k, v in value.entries:
                    params.append(f"{name}[{k}]={('***' if is_sensitive(name) or is_sensitive(k) else v)}")
            else:
                params.append(f"{name}={('***' if is_sensitive(name) else value.value)}")
        query_part = '?' + '&'.join(params) if params else ''
        return f'{SCHEME_PREFIX}{self.raw_authority}/{self.schema}{query_part}'


class HZURI:

    @staticmethod
    def match(url: str) -> Optional['re.Match']:
        return JDBC_URL_PATTERN.fullmatch(url)

    @staticmethod
    def accepts(url: str) -> bool:
        return HZURI.match(url) is not None

    @staticmethod
    def decode_authority(raw: str) -> str:
        # invalid UTF-8 becomes U+FFFD; malformed escapes such as %zz stay literal
        return urllib.parse.unquote_plus(raw, encoding='utf-8', errors='replace')

    @staticmethod
    def split_key(key: str) -> Tuple[str, Optional[str]]:
        m = KEY_VALUE_PROPERTY.fullmatch(key)
        if m:
            return (m.group('property'), m.group('key'))
        return (key, None)

    @staticmethod
    def parameter_pairs(parameters: str) -> Iterator[Tuple[str, Optional[Tuple[str, str]]]]:
        for token in parameters.split('&'):
            parts = token.split('=')
            if len(parts) != 2:
                yield (token, None)
            else:
                yield (token, (parts[0], parts[1]))

    @staticmethod
    def parse(url: str, defaults: Optional[Mapping[Any, Any]]=None) -> Optional[HZJdbcUrl]:
        m = HZURI.match(url)
        if m is None:
            logger.debug('URL not recognized by %s parser', SCHEME_PREFIX)
            return None
        raw_authority = HZURI.decode_authority(m.group('authority'))
        authorities = tuple(raw_authority.split(','))
        # name -> str for scalars, dict for indexed; frozen once every token is merged
        acc: Dict[str, Union[str, Dict[str, str]]] = {}
        if defaults:
            for k, v in defaults.items():
                acc[str(k)] = str(v)
        parameters = m.group('parameters')
        if parameters is not None:
            for _, pair in HZURI.parameter_pairs(parameters):
                if pair is None:
                    continue
                key, value = pair
                name, subkey = HZURI.split_key(key)
                HZURI._merge(acc, name, subkey, value)
        properties = {}
        for name, value in acc.items():
            if isinstance(value, dict):
                properties[name] = IndexedValue(tuple(value.items()))
            else:
                properties[name] = ScalarValue(value)
        logger.debug('Parsed %d authorities, schema %r, %d properties', len(authorities), m.group('schema'), len(properties))
        return HZJdbcUrl(authorities=authorities, schema=m.group('schema'), raw_url=url, raw_authority=raw_authority, properties=MappingProxyType(properties))

    @staticmethod
    def _merge(acc: Dict[str, Union[str, Dict[str, str]]], name: str, subkey: Optional[str], value: str):
        existing = acc.get(name)
        if subkey is None:
            if isinstance(existing, dict):
                logger.debug('Property %r redeclared as scalar, dropping indexed entries %s', name, list(existing))
            acc[name] = value
            return
        if existing is None:
            acc[name] = {subkey: value}
        elif isinstance(existing, dict):
            existing[subkey] = value
        else:
            logger.debug('Property %r redeclared with indexed syntax, dropping scalar value', name)
            acc[name] = {subkey: value}

    @staticmethod
    def property_value(parsed: HZJdbcUrl, key: str) -> Optional[str]:
        return parsed.get_property(key)
