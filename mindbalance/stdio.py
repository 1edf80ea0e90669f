# mindbalance/stdio.py
"""
Newline-delimited JSON-RPC over stdin/stdout.

One request (or batch) per line in, one response line out. Logging goes to
stderr so stdout carries protocol traffic only.
"""
from __future__ import annotations

import json
import sys
from typing import TextIO

from .logging_config import log_event
from .server import ToolServer, build_tool_server


def serve(server: ToolServer, stdin: TextIO, stdout: TextIO) -> int:
    handled = 0
    for line in stdin:
        if not line.strip():
            continue
        response = server.handle_text(line)
        handled += 1
        if response is None:
            continue
        stdout.write(json.dumps(response) + "\n")
        stdout.flush()
    return handled


def main() -> None:
    log_event("STDIO_START", "tool server listening on stdio")
    handled = serve(build_tool_server(single_session=True), sys.stdin, sys.stdout)
    log_event("STDIO_STOP", "input stream ended", {"requests": handled})


if __name__ == "__main__":
    main()
