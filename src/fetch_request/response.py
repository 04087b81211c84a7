"""
Response returned by a dispatched request.
"""
import json
from dataclasses import dataclass
from typing import Any, Dict

from .errors import StatusError


@dataclass
class FetchResponse:
    """Standardized response object."""
    status: int
    status_text: str
    headers: Dict[str, str]
    url: str
    content: bytes = b""
    data: Any = None  # Parsed JSON or Text
    ok: bool = False

    @property
    def is_success(self) -> bool:
        """Check if status code is 2xx."""
        return 200 <= self.status <= 299

    @property
    def text(self) -> str:
        return self.content.decode("utf-8", errors="replace")

    def json(self) -> Any:
        return json.loads(self.content)

    def error_for_status(self) -> "FetchResponse":
        """Raise ``StatusError`` for 4xx/5xx responses, else return self."""
        if 400 <= self.status <= 599:
            raise StatusError(self.status, self.status_text, url=self.url)
        return self
