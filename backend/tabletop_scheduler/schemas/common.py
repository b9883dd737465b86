"""Envelope shared by endpoints that only report an outcome."""
from pydantic import BaseModel


class MessageOut(BaseModel):
    success: bool = True
    message: str
