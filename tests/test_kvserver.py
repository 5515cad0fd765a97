import io

from ldbcore.kvserver import KVService


class MemoryDB:
    def __init__(self):
        self.data = {}

    def put(self, key, value):
        self.data[key] = value

    def get(self, key):
        return self.data.get(key)


def call(app, method, path, body=b""):
    environ = {
        "REQUEST_METHOD": method,
        "PATH_INFO": path,
        "CONTENT_LENGTH": str(len(body)),
        "wsgi.input": io.BytesIO(body),
    }
    captured = {}

    def start_response(status, headers):
        captured["status"] = status
        captured["headers"] = dict(headers)

    chunks = app(environ, start_response)
    return captured["status"], captured["headers"], b"".join(chunks)


def test_handle_get_missing():
    service = KVService(MemoryDB())
    assert service.handle_get("nope") == (404, b"")


def test_handle_put_then_get():
    db = MemoryDB()
    service = KVService(db)
    assert service.handle_put("key", b"value") == (200, b"")
    assert service.handle_get("key") == (200, b"value")
    assert db.data[b"key"] == b"value"


def test_wsgi_put_and_get_roundtrip():
    app = KVService(MemoryDB())
    status, headers, body = call(app, "PUT", "/kvs/put/greeting", b"hello")
    assert status.startswith("200")
    assert body == b""
    status, headers, body = call(app, "GET", "/kvs/get/greeting")
    assert status.startswith("200")
    assert headers["Content-Type"] == "text/plain"
    assert body == b"hello"
    assert headers["Content-Length"] == str(len(body))


def test_wsgi_post_is_accepted():
    app = KVService(MemoryDB())
    status, _, _ = call(app, "POST", "/kvs/put/k", b"v")
    assert status.startswith("200")
    assert call(app, "GET", "/kvs/get/k")[2] == b"v"


def test_wsgi_get_missing_is_404():
    app = KVService(MemoryDB())
    status, _, body = call(app, "GET", "/kvs/get/absent")
    assert status.startswith("404")
    assert body == b""


def test_wsgi_unknown_route_is_404():
    app = KVService(MemoryDB())
    status, _, _ = call(app, "GET", "/other/path")
    assert status.startswith("404")


def test_wsgi_wrong_method_is_405():
    db = MemoryDB()
    app = KVService(db)
    assert call(app, "PUT", "/kvs/get/k", b"v")[0].startswith("405")
    assert call(app, "GET", "/kvs/put/k")[0].startswith("405")
    assert db.data == {}