"""Route git credential prompts to the host window.

git asks for credentials by running the program named in ``GIT_ASKPASS``
with the prompt text as its argument and reading the answer from stdout.
:class:`Askpass` serves a small aiohttp endpoint on a private Unix socket
(loopback TCP on Windows) and writes a launcher script that runs
``gitboot.askpass.main``, which relays the prompt to this endpoint.
"""

from __future__ import annotations

import re
import secrets
import shutil
import socket
import sys
import tempfile
from pathlib import Path

from aiohttp import web

from gitboot.constants import (
    ASKPASS_HANDLE_ENV_VAR,
    ASKPASS_PYTHON_ENV_VAR,
    ASKPASS_TOKEN_ENV_VAR,
    ASKPASS_TOKEN_HEADER,
    GIT_ASKPASS_ENV_VAR,
)
from gitboot.exceptions import AskpassError
from gitboot.host import Window
from gitboot.logging import get_logger

__all__ = ["Askpass", "ASKPASS_SCRIPT"]

logger = get_logger(__name__)

ASKPASS_SCRIPT = f"""#!/bin/sh
exec "${ASKPASS_PYTHON_ENV_VAR}" -m gitboot.askpass.main "$@"
"""

_PASSWORD = re.compile(r"password", re.IGNORECASE)


class Askpass:
    """Credential prompt endpoint for one activation session.

    The endpoint starts lazily on the first :meth:`get_env` call and is
    shared by every git process launched with the returned overlay.
    :meth:`dispose` stops it and removes its temporary directory.

    Example:
        ```python
        askpass = Askpass(window)
        env = await askpass.get_env()
        git = Git(info, env=env)
        ...
        await askpass.dispose()
        ```
    """

    def __init__(self, window: Window, *, runtime_dir: Path | None = None) -> None:
        self._window = window
        self._runtime_dir = runtime_dir
        self._token = secrets.token_hex(16)
        self._dir: Path | None = None
        self._runner: web.AppRunner | None = None
        self._env: dict[str, str] | None = None
        self._disposed = False

    @property
    def running(self) -> bool:
        return self._runner is not None

    async def get_env(self) -> dict[str, str]:
        """Return the variables that point git's askpass at this endpoint.

        Raises:
            AskpassError: If called after :meth:`dispose`, or if the endpoint
                cannot be started.
        """
        if self._disposed:
            raise AskpassError("Askpass endpoint has been disposed")
        if self._env is None:
            self._env = await self._start()
        return dict(self._env)

    async def _start(self) -> dict[str, str]:
        self._dir = Path(tempfile.mkdtemp(prefix="gitboot-askpass-", dir=self._runtime_dir))

        app = web.Application()
        app.router.add_post("/", self._handle)
        runner = web.AppRunner(app, access_log=None)
        await runner.setup()
        self._runner = runner

        try:
            site, handle = self._create_site(runner, self._dir)
            await site.start()
            script = self._dir / "askpass.sh"
            script.write_text(ASKPASS_SCRIPT)
            script.chmod(0o700)
        except OSError as e:
            await self.dispose()
            raise AskpassError(f"Failed to start askpass endpoint: {e}") from e

        logger.debug("askpass_started", handle=handle)
        return {
            GIT_ASKPASS_ENV_VAR: str(script),
            ASKPASS_PYTHON_ENV_VAR: sys.executable,
            ASKPASS_HANDLE_ENV_VAR: handle,
            ASKPASS_TOKEN_ENV_VAR: self._token,
        }

    @staticmethod
    def _create_site(runner: web.AppRunner, directory: Path) -> tuple[web.BaseSite, str]:
        if sys.platform != "win32" and hasattr(socket, "AF_UNIX"):
            socket_path = directory / "askpass.sock"
            return web.UnixSite(runner, str(socket_path)), str(socket_path)

        sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        sock.bind(("127.0.0.1", 0))
        port = sock.getsockname()[1]
        return web.SockSite(runner, sock), f"http://127.0.0.1:{port}"

    async def _handle(self, request: web.Request) -> web.Response:
        if request.headers.get(ASKPASS_TOKEN_HEADER) != self._token:
            logger.warning("askpass_rejected_request")
            return web.json_response({"error": "forbidden"}, status=403)

        try:
            payload = await request.json()
        except ValueError:
            return web.json_response({"error": "invalid json"}, status=400)

        answer = await self.prompt(
            host=str(payload.get("host", "")),
            request=str(payload.get("request", "")),
        )
        return web.json_response({"answer": answer})

    async def prompt(self, host: str, request: str) -> str:
        """Ask the host window for the credential git requested.

        Returns:
            The answer, or an empty string if the user cancelled.
        """
        value = await self._window.show_input_box(
            prompt=f"Git: {host}",
            placeholder=request,
            password=bool(_PASSWORD.search(request)),
        )
        return value or ""

    async def dispose(self) -> None:
        """Stop the endpoint and delete its files. Safe to call repeatedly."""
        self._disposed = True
        self._env = None
        runner, self._runner = self._runner, None
        if runner is not None:
            await runner.cleanup()
        directory, self._dir = self._dir, None
        if directory is not None:
            shutil.rmtree(directory, ignore_errors=True)
            logger.debug("askpass_disposed", directory=str(directory))
