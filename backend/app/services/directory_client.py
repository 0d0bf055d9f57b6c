import logging
from typing import List, Optional

import httpx

from app.core.config import settings
from app.core.errors import StoreError
from app.schemas.category import CategoryRecord

logger = logging.getLogger(__name__)

PUBLIC_CATEGORIES_PATH = "/api/categories/public"


class DirectoryClient:
    """Fetches the flat category collection (with services) from the public API."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = (base_url or settings.DIRECTORY_API_URL).rstrip("/")
        self.timeout = timeout or settings.DIRECTORY_FETCH_TIMEOUT
        self.transport = transport

    async def fetch_collection(self) -> List[CategoryRecord]:
        """
        Fetch every category with its embedded services.

        Raises:
            StoreError: If the request fails or the payload is malformed
        """
        url = f"{self.base_url}{PUBLIC_CATEGORIES_PATH}"
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout, transport=self.transport
            ) as client:
                response = await client.get(url, params={"include_services": "true"})
                response.raise_for_status()
                payload = response.json()
        except httpx.HTTPError as e:
            logger.error(f"Failed to fetch directory from {url}: {e}")
            raise StoreError("Could not load the directory") from e
        except ValueError as e:
            logger.error(f"Directory response from {url} is not JSON: {e}")
            raise StoreError("Directory response was malformed") from e

        categories = payload.get("categories") if isinstance(payload, dict) else None
        if not isinstance(categories, list):
            raise StoreError("Directory response was malformed")

        try:
            records = [CategoryRecord.model_validate(c) for c in categories]
        except ValueError as e:
            logger.error(f"Directory response from {url} has invalid rows: {e}")
            raise StoreError("Directory response was malformed") from e
        logger.info(f"Fetched {len(records)} categories from {url}")
        return records
