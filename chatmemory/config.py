# chatmemory/config.py
from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    PROJECT_NAME: str = 'ChatMemory'
    API_V1_STR: str = '/api/v1'
    LOG_LEVEL: str = 'INFO'

    # 'local' = single tenant, anything else = multi-tenant (prod)
    WEAVIATE_ENV: str = 'prod'
    WEAVIATE_HOST: str = 'https://weaviate.ai-dank.xyz'
    WEAVIATE_LOCAL_HOST: str = 'http://host.docker.internal:8080'
    WEAVIATE_DANK_API_KEY: str = ''
    WEAVIATE_DANK_PROJECT_ID: str = ''
    WEAVIATE_CLASS_NAME: str = 'Messages'
    WEAVIATE_GRPC_HOST: str = ''
    WEAVIATE_GRPC_PORT: int = 50051
    WEAVIATE_SKIP_INIT_CHECKS: bool = False

    AGENT_HOST: str = ''
    AGENT_DANK_API_KEY: str = ''
    AGENT_TIMEOUT_SECONDS: float = 60

    CONTEXT_WINDOW_SIZE: int = 10
    CONTEXT_CERTAINTY: float = 0.5
    BULK_PAGE_SIZE: int = 500
    BULK_MAX_PAGES: int = 20

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True)

    @property
    def is_local(self) -> bool:
        return self.WEAVIATE_ENV == 'local'

settings = Settings()
