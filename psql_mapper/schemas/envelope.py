"""Response Envelope — the uniform {status, msg, data} body of every response.

Invariants:
    - status is always present; msg and data are omitted when unset
"""

from typing import Any

from pydantic import BaseModel


class ResponseEnvelope(BaseModel):
    status: int
    msg: str | None = None
    data: Any = None

    def to_body(self) -> dict:
        # Top-level only: None values inside row data must survive.
        unset = {name for name in ("msg", "data") if getattr(self, name) is None}
        return self.model_dump(exclude=unset)
