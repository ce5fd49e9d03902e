from pydantic import BaseModel


class HealthCheckResponse(BaseModel):
    version: str
    status: str
    timestamp: str
    database: str
    open_editors: int
