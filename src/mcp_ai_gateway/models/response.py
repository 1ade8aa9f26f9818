"""
Upstream response wrapper.

The gateway does not normalize responses; the body is kept exactly as the
provider returned it.
"""

import json
from typing import Any

import httpx
from pydantic import BaseModel


class CompletionResult(BaseModel):
    """Raw upstream response."""
    status_code: int
    body: Any = None

    @classmethod
    def from_httpx(cls, response: httpx.Response) -> "CompletionResult":
        """Decode the body as JSON, falling back to the raw text."""
        try:
            body = response.json()
        except ValueError:
            body = response.text
        return cls(status_code=response.status_code, body=body)

    def to_text(self) -> str:
        """Render the body as indented JSON text."""
        return json.dumps(self.body, indent=2, ensure_ascii=False)
