# ABOUTME: Shared fixtures: live paths rooted in tmp_path and an in-memory provider store
from pathlib import Path

import pytest

from livesync.models import AppType, Provider
from livesync.paths import LivePaths


class InMemoryStore:
    """ProviderStore stand-in keyed by app type."""

    def __init__(self) -> None:
        self.providers: dict[AppType, dict[str, Provider]] = {t: {} for t in AppType}
        self.current: dict[AppType, str] = {}

    def add(self, app_type: AppType, provider: Provider, current: bool = False) -> None:
        self.providers[app_type][provider.id] = provider
        if current:
            self.current[app_type] = provider.id

    def get_effective_current_provider(self, app_type: AppType) -> str | None:
        return self.current.get(app_type)

    def get_all_providers(self, app_type: AppType) -> dict[str, Provider]:
        return dict(self.providers[app_type])

    def save_provider(self, app_type: AppType, provider: Provider) -> None:
        self.providers[app_type][provider.id] = provider

    def set_current_provider(self, app_type: AppType, provider_id: str) -> None:
        self.current[app_type] = provider_id


@pytest.fixture
def paths(tmp_path: Path) -> LivePaths:
    return LivePaths.under(tmp_path / "home")


@pytest.fixture
def store() -> InMemoryStore:
    return InMemoryStore()
