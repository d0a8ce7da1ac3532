import pytest
from typer.testing import CliRunner
from hzjdbc.utils import ENV_PROPERTIES

@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for var in list(ENV_PROPERTIES) + ['HZJDBC_DEBUG']:
        monkeypatch.delenv(var, raising=False)

@pytest.fixture
def runner():
    return CliRunner()

@pytest.fixture
def cluster_url():
    return 'jdbc:hazelcast://host1:5701,host2:5702/myschema?k1=v1&k2=v2'
