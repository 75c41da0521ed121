from pydantic import BaseModel


class ApiConfig(BaseModel):
    base_prefix: str = "/api"
    routers_package: str = "doc_vault.api.fastapi.routers"
