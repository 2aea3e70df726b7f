from typing import Optional

from pydantic import BaseModel


class CarRequest(BaseModel):
    text: str


class CarDraft(BaseModel):
    """Challenge / Action / Result prose produced from rough notes."""

    challenge: str = ""
    action: str = ""
    result: str = ""
    warning: Optional[str] = None
