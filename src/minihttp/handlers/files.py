"""
=============================================================================
FILE HANDLER
=============================================================================

Reads and writes files under the configured base directory.

    GET  /files/<name>   → 200 application/octet-stream with the file bytes
    POST /files/<name>   → 201 after writing the request body to the file

Every failure is a 404: empty name, missing body, missing file, permission
denied, disk full. Clients cannot tell them apart; the log can.

=============================================================================
FILESYSTEM COLLABORATORS
=============================================================================

The handler never opens files itself. It calls two plain functions:

    read_file(path)        → bytes           raises OSError on failure
    write_file(path, data) → None            raises OSError on failure

The defaults below use the real filesystem. Tests pass fakes to count calls
or inject errors without touching the disk.

=============================================================================
PATH CONSTRUCTION
=============================================================================

The full path is `directory + name`, a plain string concatenation:

    directory="/tmp/data/"   name="notes.txt"   → "/tmp/data/notes.txt"
    directory="/tmp/data"    name="notes.txt"   → "/tmp/datanotes.txt"
    directory=""             name="notes.txt"   → "notes.txt" (cwd)
    directory="/tmp/data/"   name="../secret"   → "/tmp/data/../secret"

The name is neither decoded nor normalised, so ".." segments are honoured
by the OS. Pass a directory with a trailing slash, and do not expose the
server to untrusted clients.

=============================================================================
"""

from typing import Callable
import logging

from ..http.request import HTTPRequest
from ..http.response import HTTPResponse, ResponseBuilder, created, not_found


logger = logging.getLogger(__name__)


ReadFile = Callable[[str], bytes]
WriteFile = Callable[[str, bytes], None]


def read_file(path: str) -> bytes:
    """Return the whole file as bytes."""
    with open(path, "rb") as f:
        return f.read()


def write_file(path: str, data: bytes) -> None:
    """Create or truncate the file and write data to it."""
    with open(path, "wb") as f:
        f.write(data)


class FileHandler:
    """
    GET/POST handler pair for /files/<name>.

    Usage:

        files = FileHandler("/tmp/data/")
        router.get("/files/", prefix=True)(files.get)
        router.post("/files/", prefix=True)(files.post)
    """

    def __init__(
        self,
        directory: str,
        read_file: ReadFile = read_file,
        write_file: WriteFile = write_file,
    ):
        """
        Args:
            directory: Base directory, used as a raw string prefix.
            read_file: Collaborator used by GET.
            write_file: Collaborator used by POST.
        """
        self.directory = directory
        self._read_file = read_file
        self._write_file = write_file

    def full_path(self, name: str) -> str:
        return self.directory + name

    def get(self, request: HTTPRequest, name: str) -> HTTPResponse:
        """
        Serve a file's raw bytes.

        The bytes go out untouched. Binary files are fine; nothing checks
        that the content is text.
        """
        if not name:
            return not_found()

        path = self.full_path(name)
        try:
            data = self._read_file(path)
        except OSError as e:
            logger.debug(f"Read failed for {path}: {e}")
            return not_found()

        return ResponseBuilder().octet_stream(data).build()

    def post(self, request: HTTPRequest, name: str) -> HTTPResponse:
        """
        Write the request body to a file.

        Nothing is written when the name is empty or the request had no
        Content-Length header. Content-Length: 0 is a real (empty) body and
        creates an empty file.
        """
        if not name or request.body is None:
            return not_found()

        path = self.full_path(name)
        try:
            self._write_file(path, request.body)
        except OSError as e:
            logger.debug(f"Write failed for {path}: {e}")
            return not_found()

        logger.debug(f"Wrote {len(request.body)} bytes to {path}")
        return created()
