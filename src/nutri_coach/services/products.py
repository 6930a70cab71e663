"""Barcode product lookups via Open Food Facts."""

import asyncio
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from nutri_coach.adapters.openfoodfacts_client import ProductClient
from nutri_coach.domain.coach import MealEstimate
from nutri_coach.domain.nutrition import coerce_number
from nutri_coach.services.cache import Cache

KJ_PER_KCAL = 4.184
PRODUCT_DESCRIPTION = (
    "Nutrition facts per 100g of product, provided by Open Food Facts."
)

_logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable


@dataclass
class ProductLookupService:
    """Barcode lookup returning per-100g estimates; failures read as not found."""

    client: ProductClient
    cache: Cache
    product_ttl_seconds: int = 86400
    retry_attempts: int = 1
    retry_delay_seconds: float = 0.3

    async def lookup(self, barcode: str) -> MealEstimate | None:
        """Return the product's nutrients per 100g, or None if not found."""
        code = barcode.strip()
        if not code:
            return None
        cache_key = f"off:product:{code}"
        cached = self.cache.get(cache_key)
        if isinstance(cached, MealEstimate):
            return cached

        try:
            payload = await self._call_with_retry(
                lambda: self.client.get_product(code), action=f"product:{code}"
            )
        except Exception:
            _logger.exception("Product lookup failed: barcode=%s", code)
            return None
        estimate = parse_product(payload)
        if estimate is None:
            _logger.info("Product not found: barcode=%s", code)
            return None
        self.cache.set(cache_key, estimate, ttl_seconds=self.product_ttl_seconds)
        return estimate

    async def _call_with_retry(
        self,
        func: "Callable[[], Awaitable[dict[str, object] | None]]",
        *,
        action: str,
    ) -> dict[str, object] | None:
        attempt = 0
        while True:
            try:
                return await func()
            except Exception as exc:
                attempt += 1
                _logger.warning(
                    "Product %s failed (attempt %s/%s): %s",
                    action,
                    attempt,
                    self.retry_attempts + 1,
                    exc,
                )
                if attempt > self.retry_attempts:
                    raise
                await asyncio.sleep(self.retry_delay_seconds)


def parse_product(payload: dict[str, object] | None) -> MealEstimate | None:
    """Normalize an Open Food Facts payload into a per-100g estimate."""
    if not isinstance(payload, dict) or payload.get("status") == 0:
        return None
    product = payload.get("product")
    if not isinstance(product, dict):
        return None
    nutriments = product.get("nutriments")
    if not isinstance(nutriments, dict):
        nutriments = {}
    return MealEstimate(
        name=str(product.get("product_name") or "Unknown product"),
        description=PRODUCT_DESCRIPTION,
        calories=_energy_kcal(nutriments),
        protein_g=coerce_number(nutriments.get("proteins_100g")),
        carbs_g=coerce_number(nutriments.get("carbohydrates_100g")),
        fat_g=coerce_number(nutriments.get("fat_100g")),
        micronutrients=[],
        image_url=_text(product.get("image_url")),
    )


def _energy_kcal(nutriments: dict[str, object]) -> float:
    kcal = coerce_number(nutriments.get("energy-kcal_100g"))
    if kcal:
        return kcal
    # energy_100g is reported in kJ.
    return coerce_number(nutriments.get("energy_100g")) / KJ_PER_KCAL


def _text(value: object) -> str | None:
    if isinstance(value, str) and value:
        return value
    return None
