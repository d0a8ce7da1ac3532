from typing import Any, Dict, List, Mapping, Optional
from .uri import HZURI, SCHEME_PREFIX, IndexedValue, is_sensitive
from .utils import redact_target

ASCII_WHITESPACE = frozenset(' \t\n\r\x0b\x0c')
REPLACEMENT_CHAR = '\ufffd'

class Diagnostics:
    """
    Syntax-level health report for a Hazelcast JDBC URL.
    Never resolves hosts or inspects the cluster; only the string is examined.
    """

    def __init__(self, url: str, defaults: Optional[Mapping[str, str]]=None):
        self.url = url
        self.defaults = dict(defaults) if defaults else {}
        self.target = redact_target(url)

    def doctor(self) -> Dict[str, Any]:
        report = {'target': self.target, 'recognized': HZURI.accepts(self.url), 'status': 'healthy', 'issues': []}
        if not report['recognized']:
            report['status'] = 'unrecognized'
            report['issues'].extend(self._grammar_issues())
            return report
        m = HZURI.match(self.url)
        parsed = HZURI.parse(self.url, self.defaults)
        report['authorities'] = list(parsed.authorities)
        report['schema'] = parsed.schema
        report['property_count'] = len(parsed.properties)
        for i, authority in enumerate(parsed.authorities):
            if not authority:
                report['issues'].append(f'Authority #{i + 1} is empty.')
            elif not authority.strip():
                report['issues'].append(f'Authority #{i + 1} contains only whitespace.')
        if REPLACEMENT_CHAR in parsed.raw_authority and REPLACEMENT_CHAR not in m.group('authority'):
            report['issues'].append('Authority contains percent-encoded bytes that are not valid UTF-8.')
        parameters = m.group('parameters')
        if parameters:
            report['issues'].extend(self._parameter_issues(parameters))
        if report['issues']:
            report['status'] = 'healthy_with_warnings'
        return report

    def _grammar_issues(self) -> List[str]:
        if not self.url.startswith(SCHEME_PREFIX):
            return [f"URL must start with '{SCHEME_PREFIX}'."]
        rest = self.url[len(SCHEME_PREFIX):]
        if any((c in ASCII_WHITESPACE for c in rest)):
            return ['URL must not contain whitespace.']
        if not rest or rest.startswith('/'):
            return ['Missing authority: expected host[:port] before the schema.']
        return ["Missing schema: expected '/<schema>' after the authority."]

    def _parameter_issues(self, parameters: str) -> List[str]:
        issues = []
        syntax = {str(name): 'scalar' for name in self.defaults}
        for token, pair in HZURI.parameter_pairs(parameters):
            if pair is None:
                if token:
                    issues.append(f"Ignored parameter '{token}': expected exactly one '='.")
                continue
            name, subkey = HZURI.split_key(pair[0])
            kind = 'scalar' if subkey is None else 'indexed'
            seen = syntax.setdefault(name, kind)
            if seen != kind:
                issues.append(f"Property '{name}' uses both scalar and indexed syntax; the last one wins.")
                syntax[name] = kind
        return issues

    def describe(self) -> Dict[str, str]:
        parsed = HZURI.parse(self.url, self.defaults)
        if parsed is None:
            return {}
        result = {}
        for name, value in parsed.properties.items():
            if is_sensitive(name):
                result[name] = '***'
            elif isinstance(value, IndexedValue):
                result[name] = ','.join((f"{k}={('***' if is_sensitive(k) else v)}" for k, v in value.entries))
            else:
                result[name] = value.as_property_value()
        return result
