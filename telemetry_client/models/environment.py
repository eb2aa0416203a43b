"""Host environment data models."""

from typing import List

from pydantic import BaseModel


class ComponentInfo(BaseModel):
    """An installed plugin or theme."""

    slug: str
    name: str
    version: str
    is_active: bool = False


class EnvironmentFacts(BaseModel):
    """Facts about the host installation sent with every payload."""

    site_url: str
    platform_version: str
    runtime_version: str
    is_multisite: bool = False
    locale: str = "en_US"
    plugins: List[ComponentInfo] = []
    themes: List[ComponentInfo] = []
