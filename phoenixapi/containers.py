from dependency_injector import containers, providers

from phoenixapi.config import Settings
from phoenixapi.providers.brokerage.plaid import PlaidClient
from phoenixapi.providers.news.google_news import GoogleNewsClient
from phoenixapi.providers.prices.yahoo_finance import YahooFinanceClient


class ConfigModule(containers.DeclarativeContainer):
    """Application configuration."""

    config = providers.Singleton(Settings)


class ClientModule(containers.DeclarativeContainer):
    """Upstream service clients."""

    config = providers.DependenciesContainer()

    plaid_client = providers.Singleton(PlaidClient, settings=config.config)
    news_client = providers.Singleton(GoogleNewsClient, settings=config.config)
    price_client = providers.Singleton(YahooFinanceClient)


class Container(containers.DeclarativeContainer):
    """Application container."""

    wiring_config = containers.WiringConfiguration(
        modules=["phoenixapi.deps"],
    )

    config = providers.Container(ConfigModule)
    clients = providers.Container(ClientModule, config=config)
