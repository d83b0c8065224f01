from shared.clients.deployments import DeploymentsClient

from .config import DashboardSettings, get_settings


def get_store(settings: DashboardSettings | None = None) -> DeploymentsClient:
    settings = settings or get_settings()
    return DeploymentsClient(
        base_url=settings.api_url,
        token=settings.api_token,
        timeout=settings.request_timeout,
    )
