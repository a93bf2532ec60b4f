"""Askpass helper executed by git.

git runs ``GIT_ASKPASS`` with a prompt such as
``Username for 'https://github.com': ``. This module relays the prompt to the
gitboot askpass endpoint named in the environment and prints the answer for
git to read.

Usage (normally only via the generated ``askpass.sh``):
    python -m gitboot.askpass.main "Password for 'https://host': "
"""

from __future__ import annotations

import asyncio
import os
import re
import sys
from collections.abc import Sequence

import aiohttp

from gitboot.constants import (
    ASKPASS_HANDLE_ENV_VAR,
    ASKPASS_TOKEN_ENV_VAR,
    ASKPASS_TOKEN_HEADER,
)

__all__ = ["main", "parse_request", "request_credentials"]

_QUOTED_HOST = re.compile(r"'([^']*)'")


def parse_request(argv: Sequence[str]) -> tuple[str, str]:
    """Split git's prompt into ``(request, host)``.

    >>> parse_request(["Username", "for", "'https://github.com':", ""])
    ("Username for 'https://github.com': ", 'https://github.com')
    """
    request = " ".join(argv)
    match = _QUOTED_HOST.search(request)
    return request, match.group(1) if match else ""


async def request_credentials(handle: str, token: str, request: str, host: str) -> str:
    """POST the prompt to the endpoint at ``handle`` and return the answer.

    Raises:
        aiohttp.ClientError: If the endpoint is unreachable or refuses.
    """
    if handle.startswith("http://"):
        connector: aiohttp.BaseConnector | None = None
        url = f"{handle}/"
    else:
        connector = aiohttp.UnixConnector(path=handle)
        url = "http://askpass/"

    async with (
        aiohttp.ClientSession(connector=connector) as session,
        session.post(
            url,
            json={"request": request, "host": host},
            headers={ASKPASS_TOKEN_HEADER: token},
        ) as response,
    ):
        response.raise_for_status()
        data = await response.json()
    return str(data.get("answer", ""))


def main(argv: Sequence[str] | None = None) -> int:
    args = list(sys.argv[1:] if argv is None else argv)
    handle = os.environ.get(ASKPASS_HANDLE_ENV_VAR)
    if not handle:
        print(f"gitboot askpass: {ASKPASS_HANDLE_ENV_VAR} is not set", file=sys.stderr)
        return 1

    request, host = parse_request(args)
    token = os.environ.get(ASKPASS_TOKEN_ENV_VAR, "")
    try:
        answer = asyncio.run(request_credentials(handle, token, request, host))
    except aiohttp.ClientError as e:
        print(f"gitboot askpass: {e}", file=sys.stderr)
        return 1

    sys.stdout.write(f"{answer}\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
