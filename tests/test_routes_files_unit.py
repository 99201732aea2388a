from __future__ import annotations

import pytest

from ringtail.config import load_config
from ringtail.errors import PathOutsideRootError
from ringtail.web.app_factory import create_app
from ringtail.web.routes_files import resolve_under_root


@pytest.fixture
def root(tmp_path):
    base = tmp_path / 'served'
    base.mkdir()
    (base / 'app.log').write_bytes(b''.join(b'line %d\n' % i for i in range(1, 21)))
    (base / 'partial.log').write_bytes(b'a\nb\nc')
    (base / 'empty.log').write_bytes(b'')
    (base / 'sub').mkdir()
    (base / 'sub' / 'inner.log').write_bytes(b'x\n')
    (tmp_path / 'outside.log').write_bytes(b'secret\n')
    return base.resolve()


@pytest.fixture
def client(root, monkeypatch):
    monkeypatch.delenv('API_AUTH_REQUIRED', raising=False)
    cfg = load_config({'RINGTAIL_ROOT': str(root), 'RINGTAIL_MAX_LINES': '5'})
    app = create_app({'ringtail': cfg})
    app.testing = True
    with app.test_client() as c:
        yield c


@pytest.mark.unit
def test_tail_json(client, root):
    r = client.get('/tail', query_string={'path': 'app.log', 'lines': '2'})
    assert r.status_code == 200
    js = r.get_json() or {}
    assert js['content'] == 'line 19\nline 20\n'
    assert js['lines'] == 2
    assert js['path'] == str(root / 'app.log')
    assert js['size'] - js['start'] == len(b'line 19\nline 20\n')


@pytest.mark.unit
def test_tail_default_and_cap(client):
    # default_lines is 10, capped by RINGTAIL_MAX_LINES=5
    r = client.get('/tail', query_string={'path': 'app.log'})
    js = r.get_json() or {}
    assert js['lines'] == 5
    assert js['content'].splitlines()[0] == 'line 16'

    r2 = client.get('/tail', query_string={'path': 'app.log', 'lines': '1000'})
    assert (r2.get_json() or {})['lines'] == 5


@pytest.mark.unit
def test_tail_edge_files(client):
    r = client.get('/tail', query_string={'path': 'partial.log', 'lines': '1'})
    assert (r.get_json() or {})['content'] == 'c'
    r2 = client.get('/tail', query_string={'path': 'empty.log'})
    assert r2.status_code == 200
    assert (r2.get_json() or {})['content'] == ''


@pytest.mark.unit
def test_tail_raw(client):
    r = client.get('/tail/raw', query_string={'path': 'sub/inner.log'})
    assert r.status_code == 200
    assert r.data == b'x\n'
    assert r.mimetype == 'text/plain'
    assert r.headers['X-Tail-Start'] == '0'
    assert r.headers['X-Tail-Size'] == '2'


@pytest.mark.unit
@pytest.mark.parametrize(
    'params, status, kind',
    [
        ({}, 400, 'invalid_argument'),
        ({'path': 'app.log', 'lines': 'abc'}, 400, 'invalid_argument'),
        ({'path': 'app.log', 'lines': '0'}, 400, 'invalid_argument'),
        ({'path': 'missing.log'}, 404, 'not_found'),
        ({'path': 'sub'}, 400, 'not_a_file'),
        ({'path': '../outside.log'}, 400, 'path_outside_root'),
        ({'path': '/etc/passwd'}, 400, 'path_outside_root'),
    ],
)
def test_tail_errors(client, params, status, kind):
    r = client.get('/tail', query_string=params)
    assert r.status_code == status
    assert (r.get_json() or {}).get('kind') == kind


@pytest.mark.unit
def test_ls_and_pwd(client, root):
    r = client.get('/ls')
    assert r.status_code == 200
    assert (r.get_json() or {})['entries'] == ['app.log', 'empty.log', 'partial.log', 'sub']
    r2 = client.get('/ls', query_string={'path': 'sub'})
    assert (r2.get_json() or {})['entries'] == ['inner.log']
    r3 = client.get('/ls', query_string={'path': 'app.log'})
    assert r3.status_code == 400
    assert (r3.get_json() or {})['kind'] == 'not_a_directory'
    r4 = client.get('/ls', query_string={'path': 'nope'})
    assert r4.status_code == 404
    r5 = client.get('/pwd')
    assert (r5.get_json() or {})['cwd'] == str(root)


@pytest.mark.unit
def test_commands_endpoint(client, root):
    r = client.post('/commands', json={'command': 'tail', 'args': ['-n', '1', 'app.log']})
    assert r.status_code == 200
    assert r.get_json() == {'command': 'tail', 'output': 'line 20\n'}

    r2 = client.post('/commands', json={'line': 'ls sub'})
    assert (r2.get_json() or {})['output'] == 'inner.log\n'

    r3 = client.post('/commands', json={'line': 'pwd'})
    assert (r3.get_json() or {})['output'] == f'{root}\n'


@pytest.mark.unit
@pytest.mark.parametrize(
    'body, status, kind',
    [
        ({}, 400, 'invalid_argument'),
        ({'command': 'rm', 'args': ['x']}, 400, 'unknown_command'),
        ({'command': 'tail', 'args': 'app.log'}, 400, 'invalid_argument'),
        ({'command': 'tail', 'args': ['../outside.log']}, 400, 'path_outside_root'),
        ({'line': 'tail -n 1 ../outside.log'}, 400, 'path_outside_root'),
        ({'line': 'tail missing.log'}, 404, 'not_found'),
        (['tail', 'app.log'], 400, 'invalid_argument'),
        ('tail app.log', 400, 'invalid_argument'),
        (7, 400, 'invalid_argument'),
    ],
)
def test_commands_errors(client, body, status, kind):
    r = client.post('/commands', json=body)
    assert r.status_code == status
    assert (r.get_json() or {}).get('kind') == kind


@pytest.mark.unit
def test_resolve_under_root(tmp_path):
    base = tmp_path.resolve()
    assert resolve_under_root('', str(base)) == str(base)
    assert resolve_under_root('a/../b', str(base)) == str(base / 'b')
    assert resolve_under_root(str(base / 'c'), str(base)) == str(base / 'c')
    with pytest.raises(PathOutsideRootError):
        resolve_under_root('..', str(base))
