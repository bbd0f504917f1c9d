"""ViaCEP client: Brazilian postal code (CEP) to structured address."""

from __future__ import annotations

import logging

import httpx

from ...config import settings
from ...models.domain import PostalAddress
from .http import LookupClient

logger = logging.getLogger(__name__)


class ViaCepClient(LookupClient):
    def __init__(self, base_url: str | None = None, **kwargs) -> None:
        super().__init__(base_url or settings.viacep_base_url, **kwargs)

    async def lookup(self, postal_code: str) -> PostalAddress | None:
        """Return the address registered for an 8-digit CEP, or ``None`` if unknown.

        ViaCEP answers 200 with ``{"erro": true}`` for well-formed codes that do
        not exist, so that payload is treated the same as a miss.
        """
        try:
            data = await self._get_json(f"/ws/{postal_code}/json/")
        except httpx.HTTPError as e:
            logger.warning(f"Postal lookup failed for CEP {postal_code}: {e!r}")
            return None
        except ValueError as e:
            logger.warning(f"Postal lookup returned invalid JSON for CEP {postal_code}: {e}")
            return None

        if not isinstance(data, dict) or data.get("erro") in (True, "true"):
            logger.info(f"CEP {postal_code} not found")
            return None

        return PostalAddress(
            postal_code=postal_code,
            street=data.get("logradouro") or None,
            neighborhood=data.get("bairro") or None,
            city=data.get("localidade") or None,
            state=data.get("uf") or None,
        )
