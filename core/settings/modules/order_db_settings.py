from __future__ import annotations

from typing import Optional

from pydantic import AliasChoices, Field

from core.domain.exceptions import ConfigurationError
from core.settings.base_settings import MakelineBaseSettings

COSMOS_SQL_API = "cosmosdbsql"
MEMORY_API = "memory"

# Environment variables consulted for each field, in priority order.
ENV_NAMES = {
    "uri": ("AZURE_COSMOS_RESOURCEENDPOINT", "ORDER_DB_URI"),
    "name": ("ORDER_DB_NAME",),
    "collection_name": ("ORDER_DB_COLLECTION_NAME",),
    "container_name": ("ORDER_DB_CONTAINER_NAME",),
    "partition_key": ("ORDER_DB_PARTITION_KEY",),
    "partition_value": ("ORDER_DB_PARTITION_VALUE",),
}


class OrderDbSettings(MakelineBaseSettings):
    """
    Order store settings.

    ORDER_DB_API selects the backend: "cosmosdbsql" for Cosmos DB SQL API,
    "memory" for the in-process store, anything else for MongoDB.
    """

    api: str = Field("mongodb", alias="ORDER_DB_API")
    uri: Optional[str] = Field(
        None,
        validation_alias=AliasChoices("AZURE_COSMOS_RESOURCEENDPOINT", "ORDER_DB_URI"),
    )
    name: Optional[str] = Field(None, alias="ORDER_DB_NAME")
    collection_name: Optional[str] = Field(None, alias="ORDER_DB_COLLECTION_NAME")
    container_name: Optional[str] = Field(None, alias="ORDER_DB_CONTAINER_NAME")
    partition_key: Optional[str] = Field(None, alias="ORDER_DB_PARTITION_KEY")
    partition_value: Optional[str] = Field(None, alias="ORDER_DB_PARTITION_VALUE")
    username: str = Field("", alias="ORDER_DB_USERNAME")
    password: str = Field("", alias="ORDER_DB_PASSWORD")
    use_workload_identity_auth: bool = Field(False, alias="USE_WORKLOAD_IDENTITY_AUTH")

    @property
    def is_cosmos(self) -> bool:
        return self.api == COSMOS_SQL_API

    @property
    def is_memory(self) -> bool:
        return self.api == MEMORY_API

    def require(self, *field_names: str) -> None:
        """
        Fail fast when a backend-specific value is missing.

        Raises:
            ConfigurationError: Naming every missing environment variable
        """
        missing = [
            " or ".join(ENV_NAMES[field_name])
            for field_name in field_names
            if not getattr(self, field_name)
        ]
        if missing:
            raise ConfigurationError(f"Missing required settings: {', '.join(missing)}")
