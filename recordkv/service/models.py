from typing import Any, Dict

from pydantic import BaseModel


class ExecuteRequest(BaseModel):
    program: Dict[str, Any]


class ExecuteResponse(BaseModel):
    ok: bool = True
    text: str = ""
