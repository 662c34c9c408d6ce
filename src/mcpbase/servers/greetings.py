# ==============================================================================
#                  © 2025 Dedalus Labs, Inc. and affiliates
#                            Licensed under MIT
#                github.com/dedalus-labs/mcpbase-python/LICENSE
# ==============================================================================

"""Greetings server.

Shows the field-mapping schema style and a tool that registers another tool
while it runs.
"""

from __future__ import annotations

from collections.abc import Mapping
import os
from typing import Any

import anyio
from pydantic import Field

from ..config import ServerConfig
from ..server import BaseMCPServer


NOTICE_URI = "greetings://notice"
DEFAULT_NOTICE = "No notices at this time."


def _text_result(text: str) -> dict[str, Any]:
    return {"content": [{"type": "text", "text": text}], "structuredContent": {"text": text}}


class GreetingsServer(BaseMCPServer):
    """Greets callers and serves a plain-text notice board.

    Args:
        notice_path: Text file served as the ``notice.txt`` resource. When
            omitted the resource returns :data:`DEFAULT_NOTICE`.
    """

    def __init__(
        self,
        config: ServerConfig | Mapping[str, Any] | None = None,
        *,
        notice_path: str | os.PathLike[str] | None = None,
        **kwargs: Any,
    ) -> None:
        self._notice_path = notice_path
        super().__init__(config, **kwargs)

    def register_components(self) -> None:
        self.register_tool(
            "greet",
            {
                "description": "Greet the user",
                "input_schema": {"name": (str, Field(min_length=2, max_length=100))},
                "output_schema": {"text": str},
            },
            self.greet,
        )
        self.register_resource(
            "notice.txt",
            NOTICE_URI,
            {
                "description": "A sample notice file",
                "content": os.fspath(self._notice_path) if self._notice_path is not None else None,
                "mime_type": "text/plain",
            },
            self.get_notice_content,
        )
        self.register_tool(
            "register_custom_greeting",
            {
                "description": "This tool will register new custom greeting message",
                "output_schema": {"text": str},
            },
            self.register_custom_greeting,
        )

    def greet(self, params: Any) -> dict[str, Any]:
        return _text_result(f"Hello, {params.name}! Welcome to {self.name} version {self.version}.")

    def register_custom_greeting(self, _params: Any) -> dict[str, Any]:
        # Raises DuplicateNameError on a second call; the registry turns it into an error result.
        self.register_tool(
            "custom_greet",
            {
                "description": "Greet the user with a custom message",
                "input_schema": {"name": str, "message": str},
                "output_schema": {"text": str},
            },
            self.custom_greet,
        )
        return _text_result("Custom greeting registered successfully!")

    async def custom_greet(self, params: Any) -> dict[str, Any]:
        return _text_result(f"Hello, {params.name}! {params.message}")

    async def get_notice_content(self) -> dict[str, Any]:
        if self._notice_path is None:
            text = DEFAULT_NOTICE
        else:
            text = await anyio.Path(self._notice_path).read_text(encoding="utf-8")
        return {"contents": [{"text": text, "mimeType": "text/plain"}]}


__all__ = ["DEFAULT_NOTICE", "NOTICE_URI", "GreetingsServer"]
