import pytest
from hzjdbc.uri import HZURI, HZJdbcUrl, IndexedValue, ScalarValue

@pytest.mark.parametrize('url', ['', 'jdbc:mysql://host:3306/db', 'hazelcast://host/schema', 'JDBC:HAZELCAST://host/schema', ' jdbc:hazelcast://host/schema'])
def test_foreign_urls_not_recognized(url):
    assert not HZURI.accepts(url)
    assert HZURI.parse(url) is None

@pytest.mark.parametrize('url', ['jdbc:hazelcast://host', 'jdbc:hazelcast://host/', 'jdbc:hazelcast:///schema', 'jdbc:hazelcast://ho st/schema', 'jdbc:hazelcast://host/sch ema', 'jdbc:hazelcast://host/schema?a=1 b=2'])
def test_grammar_rejects(url):
    assert not HZURI.accepts(url)
    assert HZURI.parse(url) is None

def test_parse_authorities_schema_properties(cluster_url):
    url = HZURI.parse(cluster_url)
    assert isinstance(url, HZJdbcUrl)
    assert url.authorities == ('host1:5701', 'host2:5702')
    assert url.schema == 'myschema'
    assert url.get_property('k1') == 'v1'
    assert url.get_property('k2') == 'v2'
    assert url.raw_authority == 'host1:5701,host2:5702'

def test_raw_url_preserved(cluster_url):
    assert HZURI.parse(cluster_url).raw_url is cluster_url

def test_authority_stops_at_first_slash():
    url = HZURI.parse('jdbc:hazelcast://host:5701/a/b')
    assert url.authorities == ('host:5701',)
    assert url.schema == 'a/b'

def test_no_query_means_no_properties():
    url = HZURI.parse('jdbc:hazelcast://host/schema')
    assert url.schema == 'schema'
    assert dict(url.properties) == {}

def test_empty_parameters_keep_defaults():
    url = HZURI.parse('jdbc:hazelcast://host/schema?', {'user': 'alice'})
    assert url is not None
    assert url.schema == 'schema'
    assert dict(url.properties) == {'user': ScalarValue('alice')}

def test_authority_is_percent_decoded():
    url = HZURI.parse('jdbc:hazelcast://h%C3%A9st%3A5701%2Cother+host/schema')
    assert url.raw_authority == 'hést:5701,other host'
    assert url.authorities == ('hést:5701', 'other host')

def test_schema_is_not_decoded():
    assert HZURI.parse('jdbc:hazelcast://host/my%20schema').schema == 'my%20schema'

def test_empty_authority_tokens_preserved():
    url = HZURI.parse('jdbc:hazelcast://a,,b,/schema')
    assert url.authorities == ('a', '', 'b', '')

def test_invalid_utf8_authority_is_replaced():
    url = HZURI.parse('jdbc:hazelcast://h%ffst:5701,%ff%fe/schema')
    assert url is not None
    assert url.authorities == ('h\ufffdst:5701', '\ufffd\ufffd')

def test_malformed_escapes_stay_literal():
    url = HZURI.parse('jdbc:hazelcast://a%zz:5701,b%2/schema')
    assert url.raw_authority == 'a%zz:5701,b%2'
    assert url.authorities == ('a%zz:5701', 'b%2')

def test_indexed_property_serialization():
    url = HZURI.parse('jdbc:hazelcast://host:5701/schema?discoveryStrategy[className]=com.example.Strategy&discoveryStrategy[key2]=value2')
    assert url.get_property('discoveryStrategy') == 'className=com.example.Strategy,key2=value2'
    value = url.properties['discoveryStrategy']
    assert isinstance(value, IndexedValue)
    assert value.kind == 'indexed'
    assert value.get('key2') == 'value2'
    assert value.get('missing') is None
    assert value.as_dict() == {'className': 'com.example.Strategy', 'key2': 'value2'}

def test_indexed_duplicate_subkey_overwrites_in_place():
    url = HZURI.parse('jdbc:hazelcast://host/schema?p[a]=1&p[b]=2&p[a]=3')
    assert url.get_property('p') == 'a=3,b=2'

def test_scalar_last_write_wins():
    url = HZURI.parse('jdbc:hazelcast://host/schema?k=1&k=2')
    assert url.get_property('k') == '2'

def test_query_overrides_defaults():
    url = HZURI.parse('jdbc:hazelcast://host/schema?user=bob', {'user': 'alice'})
    assert url.get_property('user') == 'bob'

def test_defaults_are_stringified_scalars():
    url = HZURI.parse('jdbc:hazelcast://host/schema', {'port': 5701})
    assert url.properties['port'] == ScalarValue('5701')
    assert url.properties['port'].kind == 'scalar'

def test_malformed_tokens_skipped():
    url = HZURI.parse('jdbc:hazelcast://host/schema?a=1&bad&b=2&c=3=4')
    assert dict(url.properties) == {'a': ScalarValue('1'), 'b': ScalarValue('2')}
    assert url.get_property('bad') is None

def test_empty_value_and_empty_key_accepted():
    url = HZURI.parse('jdbc:hazelcast://host/schema?a=&=x')
    assert url.get_property('a') == ''
    assert url.get_property('') == 'x'

def test_indexed_over_scalar_default_replaces_it():
    url = HZURI.parse('jdbc:hazelcast://host/schema?discoveryStrategy[className]=X', {'discoveryStrategy': 'old'})
    assert url.properties['discoveryStrategy'] == IndexedValue((('className', 'X'),))

def test_scalar_after_indexed_replaces_it():
    url = HZURI.parse('jdbc:hazelcast://host/schema?p[a]=1&p=plain')
    assert url.properties['p'] == ScalarValue('plain')

def test_nested_brackets_split_on_last_pair():
    assert HZURI.split_key('a[b][c]') == ('a[b]', 'c')
    assert HZURI.split_key('plain') == ('plain', None)
    assert HZURI.split_key('a[]') == ('a[]', None)

def test_parameter_pairs():
    pairs = list(HZURI.parameter_pairs('a=1&bad&b=2'))
    assert pairs == [('a=1', ('a', '1')), ('bad', None), ('b=2', ('b', '2'))]

def test_property_value_absent():
    url = HZURI.parse('jdbc:hazelcast://host/schema?a=1')
    assert HZURI.property_value(url, 'a') == '1'
    assert HZURI.property_value(url, 'nope') is None

def test_parse_twice_equal_but_independent(cluster_url):
    first = HZURI.parse(cluster_url, {'user': 'alice'})
    second = HZURI.parse(cluster_url, {'user': 'alice'})
    assert first == second
    assert first is not second
    assert first.properties is not second.properties

def test_result_is_read_only(cluster_url):
    url = HZURI.parse(cluster_url)
    with pytest.raises(AttributeError):
        url.schema = 'other'
    with pytest.raises(TypeError):
        url.properties['k1'] = ScalarValue('x')

def test_defaults_mapping_not_mutated():
    defaults = {'user': 'alice'}
    HZURI.parse('jdbc:hazelcast://host/schema?user=bob&p[a]=1', defaults)
    assert defaults == {'user': 'alice'}

def test_connection_string_masks_secrets():
    url = HZURI.parse('jdbc:hazelcast://host:5701/schema?user=bob&password=hunter2&ds[secretKey]=s&ds[name]=n')
    assert url.connection_string == 'jdbc:hazelcast://host:5701/schema?user=bob&password=***&ds[secretKey]=***&ds[name]=n'

def test_result_is_unhashable(cluster_url):
    with pytest.raises(TypeError):
        hash(HZURI.parse(cluster_url))
