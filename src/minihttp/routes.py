"""
The server's route table.

    GET   /             exact
    GET   /user-agent   exact
    GET   /echo/        prefix
    GET   /files/       prefix
    POST  /files/       prefix

Anything else, including every other method, falls through to 404.
"""

from .handlers.basic import echo, root, user_agent
from .handlers.files import FileHandler, ReadFile, WriteFile, read_file, write_file
from .http.request import HTTPRequest
from .http.response import HTTPResponse
from .http.router import Router


def create_router(
    directory: str = "",
    read_file: ReadFile = read_file,
    write_file: WriteFile = write_file,
) -> Router:
    """
    Build a Router with the five routes above.

    Args:
        directory: Base directory for /files/, used as a raw string prefix.
        read_file: Filesystem read collaborator.
        write_file: Filesystem write collaborator.
    """
    router = Router()
    files = FileHandler(directory, read_file=read_file, write_file=write_file)

    router.get("/")(root)
    router.get("/user-agent")(user_agent)
    router.get("/echo/", prefix=True)(echo)
    router.get("/files/", prefix=True)(files.get)
    router.post("/files/", prefix=True)(files.post)

    return router


def dispatch(
    request: HTTPRequest,
    directory: str = "",
    read_file: ReadFile = read_file,
    write_file: WriteFile = write_file,
) -> HTTPResponse:
    """
    Route a single request without keeping a Router around.

    Pure apart from the two collaborators: the same request and the same
    collaborator behaviour always give the same response.
    """
    return create_router(directory, read_file, write_file).handle(request)
