"""Registry of configured music providers."""

import asyncio

from music_bridge.exceptions import MusicBridgeException, NotFoundException, NotSupportedException
from music_bridge.logging_config import get_logger, log_with_context
from music_bridge.models.base_models import ProviderSearchResults
from music_bridge.providers.base import MusicProvider, ProviderCapability

logger = get_logger(__name__)


class ProviderRegistry:
    """Providers by id, in registration order."""

    def __init__(self, providers: list[MusicProvider] | None = None):
        self._providers: dict[str, MusicProvider] = {}
        for provider in providers or []:
            self.register(provider)

    def register(self, provider: MusicProvider) -> None:
        if provider.provider_id in self._providers:
            raise ValueError(f"Provider already registered: {provider.provider_id}")
        self._providers[provider.provider_id] = provider
        log_with_context(
            logger,
            "info",
            "Provider registered",
            provider=provider.provider_id,
            capabilities=sorted(capability.value for capability in provider.capabilities),
            event_type="provider_registered",
        )

    def unregister(self, provider_id: str) -> None:
        self._providers.pop(provider_id, None)

    @property
    def providers(self) -> list[MusicProvider]:
        return list(self._providers.values())

    def get(self, provider_id: str) -> MusicProvider:
        """Look up a provider.

        Raises:
            NotFoundException: No provider with this id
        """
        provider = self._providers.get(provider_id)
        if provider is None:
            raise NotFoundException(f"Unknown provider: {provider_id}", details={"provider": provider_id})
        return provider

    def require(self, provider_id: str, capability: ProviderCapability) -> MusicProvider:
        """Look up a provider that implements ``capability``.

        Raises:
            NotFoundException: No provider with this id
            NotSupportedException: Provider lacks the capability
        """
        provider = self.get(provider_id)
        if not provider.supports(capability):
            raise NotSupportedException(
                f"{provider.display_name} does not support {capability.value}",
                details={"provider": provider_id, "capability": capability.value},
            )
        return provider

    async def search_all(self, query: str, limit: int | None = None) -> ProviderSearchResults:
        """Run ``query`` on every usable search-capable provider concurrently.

        A provider that fails is reported under ``errors`` with its
        user-facing message; the others still return results.
        """
        targets = [
            provider
            for provider in self._providers.values()
            if provider.supports(ProviderCapability.SEARCH) and provider.is_usable
        ]
        outcomes = await asyncio.gather(
            *(provider.search(query, limit) for provider in targets),
            return_exceptions=True,
        )

        results = ProviderSearchResults()
        for provider, outcome in zip(targets, outcomes):
            if isinstance(outcome, MusicBridgeException):
                log_with_context(
                    logger,
                    "warning",
                    "Provider search failed",
                    provider=provider.provider_id,
                    error=outcome.message,
                    error_code=outcome.code.value,
                    event_type="provider_search_error",
                )
                results.errors[provider.provider_id] = outcome.user_message
            elif isinstance(outcome, BaseException):
                raise outcome
            else:
                results.results[provider.provider_id] = outcome
        return results
