# backend/agora/schemas/health.py
from pydantic import BaseModel


class RootResponse(BaseModel):
    message: str
    version: str
    docs: str
    environment: str


class HealthResponse(BaseModel):
    status: str
    service: str
    version: str
    environment: str
    online_users: int
