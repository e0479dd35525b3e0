"""LOS data-access layer: fetches and maps payloads before the engine runs."""

from cardscore.integrations.los.client import LosClient
from cardscore.integrations.los.service import process_application

__all__ = ["LosClient", "process_application"]
