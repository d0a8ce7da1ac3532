import os
import re
from typing import Dict, Iterable, Mapping, Optional
from .uri import SCHEME_PREFIX, is_sensitive

ENV_PROPERTIES = {'HZJDBC_USER': 'user', 'HZJDBC_PASSWORD': 'password', 'HZJDBC_CLUSTER_NAME': 'clusterName'}

_PARAM_VALUE = re.compile('(?P<lead>[?&])(?P<key>[^=&?]+)=(?P<value>[^&]*)')

def get_env_defaults(environ: Optional[Mapping[str, str]]=None) -> Dict[str, str]:
    if environ is None:
        environ = os.environ
    defaults = {}
    for var, prop in ENV_PROPERTIES.items():
        value = environ.get(var)
        if value is not None:
            defaults[prop] = value
    return defaults

def parse_property_options(options: Optional[Iterable[str]]) -> Dict[str, str]:
    """
    Turn repeated ``--prop key=value`` options into a dict.

    Splits on the first ``=`` only, so values may themselves contain ``=``.
    """
    props = {}
    for opt in options or ():
        if '=' not in opt:
            raise ValueError(f"Invalid property option '{opt}'. Expected key=value")
        k, v = opt.split('=', 1)
        if not k:
            raise ValueError(f"Invalid property option '{opt}'. Key is empty")
        props[k] = v
    return props

def redact_target(target: str) -> str:
    if not target:
        return ''
    if not target.startswith(SCHEME_PREFIX) or '?' not in target:
        return target

    def _mask(m):
        if is_sensitive(m.group('key')):
            return f"{m.group('lead')}{m.group('key')}=***"
        return m.group(0)
    head, query = target.split('?', 1)
    return head + _PARAM_VALUE.sub(_mask, '?' + query)
