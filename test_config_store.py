"""
Test Configuration Store
========================

Resolution order, dotted-key access, default sections and the process-wide
accessor.
"""

import threading

import pytest

from envstore.config.config_store import (
    MISSING,
    NOT_A_MAP,
    ConfigStore,
    config,
    env,
    get_store,
    walk_path,
)
from envstore.config.errors import UnreadableError


def make_store(tmp_path, **kwargs):
    return ConfigStore(root_path=tmp_path, **kwargs)


def test_defaults_without_env_file(tmp_path):
    store = make_store(tmp_path)

    assert store.get('app.name') == 'My Application'
    assert store.get('app.env') == 'production'
    assert store.get('app.debug') is False
    assert store.get('app.timezone') == 'UTC'
    assert store.get('database.default') == 'mysql'
    assert store.get('database.connections.mysql.port') == '3306'
    assert store.get('database.connections.sqlite.database') == str(tmp_path / 'database.sqlite')
    assert store.get('cache.stores.file.path') == str(tmp_path / 'cache')
    assert store.get('cache.stores.redis.port') == 6379
    assert store.get('cache.stores.redis.password') is None
    assert store.get('logging.channels.single.path') == str(tmp_path / 'logs' / 'app.log')
    assert store.get('logging.channels.single.level') == 'debug'
    assert store.env is None


def test_env_file_populates_sections(tmp_path, write_env):
    write_env(
        "APP_NAME=\"Env App\"\n"
        "APP_DEBUG=true\n"
        "DB_HOST=db.internal\n"
        "DB_PASSWORD='s3cret'\n"
        "REDIS_PORT=6380\n"
        "LOG_LEVEL=info\n"
    )
    store = make_store(tmp_path)

    assert store.get('app.name') == 'Env App'
    assert store.get('app.debug') is True
    assert store.get('database.connections.mysql.host') == 'db.internal'
    assert store.get('database.connections.mysql.password') == 's3cret'
    assert store.get('cache.stores.redis.port') == '6380'
    assert store.get('logging.channels.single.level') == 'info'


def test_debug_flag_requires_exact_true(tmp_path, write_env):
    write_env("APP_DEBUG=TRUE\n")
    assert make_store(tmp_path).get('app.debug') is False


def test_custom_env_filename(tmp_path, write_env):
    write_env("APP_ENV=testing\n", name='.env.testing')
    store = make_store(tmp_path, env_file='.env.testing')

    assert store.get('app.env') == 'testing'
    assert store.env_path == tmp_path / '.env.testing'


def test_resolve_env_precedence(tmp_path, write_env, monkeypatch):
    write_env("LAYERED=file\nFILE_ONLY=file\nOS_AND_FILE=file\n")
    monkeypatch.setenv('OS_AND_FILE', 'os')
    monkeypatch.setenv('LAYERED', 'os')
    store = make_store(tmp_path, overrides={'LAYERED': 'override'})
    store.init()

    assert store.resolve_env('LAYERED') == 'override'
    assert store.resolve_env('OS_AND_FILE') == 'os'
    assert store.resolve_env('FILE_ONLY') == 'file'
    assert store.resolve_env('NOWHERE', 'default') == 'default'
    assert store.resolve_env('NOWHERE') is None


def test_override_table_beats_env_file(tmp_path, write_env):
    write_env("APP_NAME=FromFile\n")
    store = make_store(tmp_path, overrides={'APP_NAME': 'FromOverride'})

    assert store.get('app.name') == 'FromOverride'


def test_set_override_after_init(tmp_path, write_env):
    write_env("TOKEN=file\n")
    store = make_store(tmp_path).init()
    store.set_override('TOKEN', 'runtime')

    assert store.resolve_env('TOKEN') == 'runtime'


def test_get_returns_default_for_missing_root(tmp_path):
    store = make_store(tmp_path)
    store.all().pop('database')

    assert store.get('database.connections.mysql.host', 'fallback') == 'fallback'


def test_get_returns_default_when_intermediate_is_not_a_map(tmp_path):
    store = make_store(tmp_path)
    store.set('database.connections', 'not-a-map')

    assert store.get('database.connections.mysql.host', 'fallback') == 'fallback'


def test_lookup_distinguishes_missing_from_wrong_shape(tmp_path):
    store = make_store(tmp_path)
    store.set('database.connections', 'not-a-map')

    missing = store.lookup('cache.stores.memcached.host')
    assert not missing.found
    assert missing.reason == MISSING
    assert missing.missing_segment == 'memcached'

    wrong_shape = store.lookup('database.connections.mysql.host')
    assert not wrong_shape.found
    assert wrong_shape.reason == NOT_A_MAP
    assert wrong_shape.missing_segment == 'mysql'


def test_set_then_get_and_break_path(tmp_path):
    store = make_store(tmp_path)

    store.set('a.b.c', 5)
    assert store.get('a.b.c') == 5

    store.set('a.b', 9)
    assert store.get('a.b') == 9
    assert store.get('a.b.c', 'gone') == 'gone'


def test_set_replaces_scalar_along_path(tmp_path):
    store = make_store(tmp_path)
    store.set('app.name.short', 'MA')

    assert store.get('app.name') == {'short': 'MA'}


def test_get_none_value_is_found(tmp_path):
    store = make_store(tmp_path)

    assert store.has('cache.stores.redis.password')
    assert store.get('cache.stores.redis.password', 'default') is None
    assert not store.has('cache.stores.redis.user')


def test_all_aliases_the_tree(tmp_path):
    store = make_store(tmp_path)
    store.all()['custom'] = {'key': 'value'}

    assert store.get('custom.key') == 'value'


def test_set_is_not_persisted(tmp_path, write_env):
    path = write_env("APP_NAME=Persisted\n")
    store = make_store(tmp_path)
    store.set('app.name', 'Runtime')

    assert store.get('app.name') == 'Runtime'
    assert path.read_text(encoding='utf-8') == "APP_NAME=Persisted\n"


def test_init_is_idempotent(tmp_path, write_env):
    path = write_env("APP_NAME=First\n")
    store = make_store(tmp_path)
    store.init()
    loaded_env = store.env

    path.write_text("APP_NAME=Second\n", encoding='utf-8')
    store.init()

    assert store.env is loaded_env
    assert store.get('app.name') == 'First'
    assert store.initialized


def test_accessors_trigger_init(tmp_path):
    store = make_store(tmp_path)
    assert not store.initialized

    store.get('app.name')
    assert store.initialized


def test_unreadable_env_file_aborts_init(tmp_path):
    (tmp_path / 'envdir').mkdir()
    store = make_store(tmp_path, env_file='envdir')

    with pytest.raises(UnreadableError):
        store.init()
    assert not store.initialized


def test_invalid_utf8_env_file_aborts_init(tmp_path):
    (tmp_path / '.env').write_bytes(b'A=\xff\xfe\nB=2\n')
    store = make_store(tmp_path)

    with pytest.raises(UnreadableError):
        store.init()
    assert not store.initialized


def test_connection_profiles(tmp_path, write_env):
    write_env("DB_HOST=primary\n")
    store = make_store(tmp_path)

    assert store.connection()['host'] == 'primary'
    assert store.connection()['driver'] == 'mysql'
    assert store.connection('sqlite')['driver'] == 'sqlite'
    assert store.connection('postgres') == {}

    store.set('database.default', 'sqlite')
    assert store.connection()['driver'] == 'sqlite'


def test_connection_profile_keys(tmp_path):
    profile = make_store(tmp_path).connection('mysql')

    assert set(profile) == {
        'driver', 'host', 'port', 'database', 'username',
        'password', 'charset', 'collation', 'prefix',
    }


def test_walk_path_on_plain_dict():
    tree = {'a': {'b': 1}}

    assert walk_path(tree, 'a.b').value == 1
    assert walk_path(tree, 'a.b.c').reason == NOT_A_MAP
    assert walk_path(tree, 'x').reason == MISSING


def test_concurrent_set_and_get(tmp_path):
    store = make_store(tmp_path)

    def worker(n):
        for i in range(50):
            store.set(f'workers.w{n}.i{i}', i)
            store.get(f'workers.w{n}.i{i}')

    threads = [threading.Thread(target=worker, args=(n,)) for n in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert store.get('workers.w7.i49') == 49
    assert len(store.get('workers')) == 8


def test_global_accessor_is_created_once(tmp_path, write_env, monkeypatch):
    write_env("APP_NAME=Global\nCUSTOM_VAR=custom\n")
    monkeypatch.chdir(tmp_path)

    store = get_store()

    assert store is get_store()
    assert store.root_path.resolve() == tmp_path.resolve()
    assert config('app.name') == 'Global'
    assert env('CUSTOM_VAR') == 'custom'
    assert env('MISSING_VAR', 'default') == 'default'


def test_global_accessor_finds_env_in_parent(tmp_path, write_env, monkeypatch):
    write_env("APP_NAME=Parent\n")
    nested = tmp_path / 'pkg' / 'sub'
    nested.mkdir(parents=True)
    monkeypatch.chdir(nested)

    assert config('app.name') == 'Parent'
    assert get_store().root_path.resolve() == tmp_path.resolve()
