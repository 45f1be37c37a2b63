from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict


class MakelineBaseSettings(BaseSettings):
    """
    Base for every settings section.

    Values come from the process environment (.env is loaded into it by
    python-dotenv before any section is built). Fields are declared with the
    exact environment variable name as alias.
    """

    model_config = SettingsConfigDict(extra="ignore")
