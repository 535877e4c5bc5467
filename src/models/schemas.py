from pydantic import BaseModel


class HealthStatus(BaseModel):
    status: str
    version: str
    strategy: str


class GenerateHtmlResponse(BaseModel):
    success: bool = True
    htmlContent: str
    message: str | None = None


class ErrorResponse(BaseModel):
    error: str
    message: str | None = None
