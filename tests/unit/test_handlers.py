"""
Unit tests for the route handlers and the route table.
"""

from pathlib import Path
from typing import Dict, List, Tuple

import pytest

from minihttp.handlers import FileHandler, echo, root, user_agent
from minihttp.http.request import HTTPMethod, HTTPRequest, parse_request
from minihttp.http.status_codes import HTTPStatus
from minihttp.routes import create_router, dispatch


class FakeFiles:
    """In-memory filesystem collaborators that record every call."""

    def __init__(self, files: Dict[str, bytes] = None, error: OSError = None):
        self.files = dict(files or {})
        self.error = error
        self.reads: List[str] = []
        self.writes: List[Tuple[str, bytes]] = []

    def read(self, path: str) -> bytes:
        self.reads.append(path)
        if self.error is not None:
            raise self.error
        try:
            return self.files[path]
        except KeyError:
            raise FileNotFoundError(path)

    def write(self, path: str, data: bytes) -> None:
        self.writes.append((path, data))
        if self.error is not None:
            raise self.error
        self.files[path] = data


def get(target: str, **headers: str) -> HTTPRequest:
    return HTTPRequest(method=HTTPMethod.GET, target=target, headers=headers, method_name="GET")


def post(target: str, body=None) -> HTTPRequest:
    return HTTPRequest(method=HTTPMethod.POST, target=target, body=body, method_name="POST")


class TestBasicHandlers:
    """Tests for root, user_agent and echo."""

    def test_root(self):
        response = root(get("/"), "")

        assert response.to_bytes() == b"HTTP/1.1 200 OK\r\n\r\n"

    def test_user_agent(self):
        request = parse_request(b"GET /user-agent HTTP/1.1\r\nUser-Agent: foobar/1.2.3\r\n\r\n")

        assert user_agent(request, "").to_bytes() == (
            b"HTTP/1.1 200 OK\r\n"
            b"Content-Type: text/plain\r\n"
            b"Content-Length: 12\r\n"
            b"\r\n"
            b"foobar/1.2.3\r\n"
            b"\r\n"
        )

    def test_user_agent_missing(self):
        """Test that a request without User-Agent gets a 404."""
        assert user_agent(get("/user-agent"), "").status == HTTPStatus.NOT_FOUND

    def test_user_agent_lowercase_header_is_missing(self):
        request = parse_request(b"GET /user-agent HTTP/1.1\r\nuser-agent: curl\r\n\r\n")

        assert user_agent(request, "").status == HTTPStatus.NOT_FOUND

    def test_user_agent_empty_value(self):
        """Test that a present but empty header is echoed as empty text."""
        response = user_agent(get("/user-agent", **{"User-Agent": ""}), "")

        assert response.status == HTTPStatus.OK
        assert response.headers["Content-Length"] == "0"
        assert response.body == b""

    def test_echo(self):
        response = echo(get("/echo/abc"), "abc")

        assert response.headers == {"Content-Type": "text/plain", "Content-Length": "3"}
        assert response.body == b"abc"

    def test_echo_empty_is_bare_200(self):
        """Test that /echo/ with nothing after it is a plain 200."""
        assert echo(get("/echo/"), "").to_bytes() == b"HTTP/1.1 200 OK\r\n\r\n"

    def test_echo_multibyte_length(self):
        """Test that Content-Length counts bytes of the UTF-8 text."""
        response = echo(get("/echo/ü"), "ü")

        assert response.headers["Content-Length"] == "2"
        assert response.body == "ü".encode("utf-8")


class TestFileHandler:
    """Tests for FileHandler with fake collaborators."""

    def test_get_existing_file(self):
        fs = FakeFiles({"/data/notes.txt": b"hello"})
        handler = FileHandler("/data/", read_file=fs.read, write_file=fs.write)

        response = handler.get(get("/files/notes.txt"), "notes.txt")

        assert response.status == HTTPStatus.OK
        assert response.headers == {
            "Content-Type": "application/octet-stream",
            "Content-Length": "5",
        }
        assert response.body == b"hello"
        assert fs.reads == ["/data/notes.txt"]

    def test_get_missing_file(self):
        fs = FakeFiles()
        handler = FileHandler("/data/", read_file=fs.read, write_file=fs.write)

        response = handler.get(get("/files/nope"), "nope")

        assert response.to_bytes() == b"HTTP/1.1 404 Not Found\r\n\r\n"

    @pytest.mark.parametrize("error", [
        PermissionError("denied"),
        IsADirectoryError("dir"),
        OSError("disk"),
    ])
    def test_get_read_error_is_404(self, error: OSError):
        fs = FakeFiles(error=error)
        handler = FileHandler("/data/", read_file=fs.read, write_file=fs.write)

        assert handler.get(get("/files/x"), "x").status == HTTPStatus.NOT_FOUND

    def test_get_empty_name_does_not_read(self):
        fs = FakeFiles()
        handler = FileHandler("/data/", read_file=fs.read, write_file=fs.write)

        assert handler.get(get("/files/"), "").status == HTTPStatus.NOT_FOUND
        assert fs.reads == []

    def test_post_writes_body(self):
        fs = FakeFiles()
        handler = FileHandler("/data/", read_file=fs.read, write_file=fs.write)

        response = handler.post(post("/files/out.bin", b"\x00\x01"), "out.bin")

        assert response.to_bytes() == b"HTTP/1.1 201 Created\r\n\r\n"
        assert fs.writes == [("/data/out.bin", b"\x00\x01")]

    def test_post_empty_body_creates_file(self):
        """Test that Content-Length: 0 writes an empty file."""
        fs = FakeFiles()
        handler = FileHandler("/data/", read_file=fs.read, write_file=fs.write)

        assert handler.post(post("/files/empty", b""), "empty").status == HTTPStatus.CREATED
        assert fs.writes == [("/data/empty", b"")]

    def test_post_without_body_does_not_write(self):
        fs = FakeFiles()
        handler = FileHandler("/data/", read_file=fs.read, write_file=fs.write)

        assert handler.post(post("/files/x", None), "x").status == HTTPStatus.NOT_FOUND
        assert fs.writes == []

    def test_post_empty_name_does_not_write(self):
        fs = FakeFiles()
        handler = FileHandler("/data/", read_file=fs.read, write_file=fs.write)

        assert handler.post(post("/files/", b"data"), "").status == HTTPStatus.NOT_FOUND
        assert fs.writes == []

    def test_post_write_error_is_404(self):
        fs = FakeFiles(error=OSError("disk full"))
        handler = FileHandler("/data/", read_file=fs.read, write_file=fs.write)

        assert handler.post(post("/files/x", b"data"), "x").status == HTTPStatus.NOT_FOUND
        assert len(fs.writes) == 1

    @pytest.mark.parametrize("directory,name,expected", [
        ("/tmp/data/", "notes.txt", "/tmp/data/notes.txt"),
        ("/tmp/data", "notes.txt", "/tmp/datanotes.txt"),
        ("", "notes.txt", "notes.txt"),
        ("/tmp/data/", "../secret", "/tmp/data/../secret"),
        ("/tmp/data/", "a%20b", "/tmp/data/a%20b"),
    ])
    def test_full_path_is_concatenation(self, directory: str, name: str, expected: str):
        assert FileHandler(directory).full_path(name) == expected


class TestFileHandlerOnDisk:
    """Tests for the default filesystem collaborators."""

    def test_write_then_read(self, files_dir: str, tmp_path: Path):
        handler = FileHandler(files_dir)

        assert handler.post(post("/files/a.txt", b"abc"), "a.txt").status == HTTPStatus.CREATED
        assert (tmp_path / "a.txt").read_bytes() == b"abc"

        response = handler.get(get("/files/a.txt"), "a.txt")
        assert response.body == b"abc"

    def test_post_overwrites(self, files_dir: str, tmp_path: Path):
        (tmp_path / "a.txt").write_bytes(b"old contents")
        handler = FileHandler(files_dir)

        handler.post(post("/files/a.txt", b"new"), "a.txt")

        assert (tmp_path / "a.txt").read_bytes() == b"new"

    def test_binary_file_served_verbatim(self, files_dir: str, tmp_path: Path):
        data = b"\xff\xfe\x00binary\x80"
        (tmp_path / "blob").write_bytes(data)

        response = FileHandler(files_dir).get(get("/files/blob"), "blob")

        assert response.body == data
        assert response.headers["Content-Length"] == str(len(data))

    def test_directory_is_404(self, files_dir: str, tmp_path: Path):
        (tmp_path / "sub").mkdir()

        response = FileHandler(files_dir).get(get("/files/sub"), "sub")

        assert response.status == HTTPStatus.NOT_FOUND

    def test_post_into_missing_directory_is_404(self, files_dir: str):
        response = FileHandler(files_dir).post(post("/files/no/such/x", b"data"), "no/such/x")

        assert response.status == HTTPStatus.NOT_FOUND


class TestDispatch:
    """Tests for the route table as a whole."""

    @pytest.mark.parametrize("raw", [
        b"GET /unknown HTTP/1.1\r\n\r\n",
        b"GET /echo HTTP/1.1\r\n\r\n",
        b"GET /files HTTP/1.1\r\n\r\n",
        b"GET /user-agent/ HTTP/1.1\r\nUser-Agent: x\r\n\r\n",
        b"POST / HTTP/1.1\r\n\r\n",
        b"POST /echo/abc HTTP/1.1\r\nContent-Length: 0\r\n\r\n",
        b"PUT /files/x HTTP/1.1\r\nContent-Length: 1\r\n\r\nx",
        b"DELETE /files/x HTTP/1.1\r\n\r\n",
        b"PATCH / HTTP/1.1\r\n\r\n",
    ])
    def test_unrouted_requests_are_bare_404(self, raw: bytes):
        fs = FakeFiles()

        response = dispatch(parse_request(raw), "/data/", fs.read, fs.write)

        assert response.to_bytes() == b"HTTP/1.1 404 Not Found\r\n\r\n"
        assert fs.reads == []
        assert fs.writes == []

    def test_root(self):
        assert dispatch(get("/")).to_bytes() == b"HTTP/1.1 200 OK\r\n\r\n"

    def test_echo_suffix_verbatim(self):
        """Test that the echo suffix keeps slashes and percent escapes."""
        response = dispatch(get("/echo/a/b%20c"))

        assert response.body == b"a/b%20c"

    def test_user_agent_route(self):
        response = dispatch(get("/user-agent", **{"User-Agent": "curl/8.0"}))

        assert response.body == b"curl/8.0"

    def test_get_reads_exactly_once(self):
        fs = FakeFiles({"/data/f": b"x"})

        dispatch(get("/files/f"), "/data/", fs.read, fs.write)

        assert fs.reads == ["/data/f"]
        assert fs.writes == []

    def test_post_writes_exactly_once(self):
        fs = FakeFiles()

        dispatch(post("/files/f", b"body"), "/data/", fs.read, fs.write)

        assert fs.writes == [("/data/f", b"body")]
        assert fs.reads == []

    def test_same_request_same_response(self):
        """Test that dispatch is deterministic for fixed collaborator behaviour."""
        fs = FakeFiles({"/data/f": b"contents"})
        request = get("/files/f")

        first = dispatch(request, "/data/", fs.read, fs.write).to_bytes()
        second = dispatch(request, "/data/", fs.read, fs.write).to_bytes()

        assert first == second

    def test_create_router_table(self):
        router = create_router("/data/")

        assert [(r.method, r.path, r.prefix) for r in router.routes] == [
            (HTTPMethod.GET, "/", False),
            (HTTPMethod.GET, "/user-agent", False),
            (HTTPMethod.GET, "/echo/", True),
            (HTTPMethod.GET, "/files/", True),
            (HTTPMethod.POST, "/files/", True),
        ]
