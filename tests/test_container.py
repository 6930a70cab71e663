"""Tests for container wiring."""

import asyncio

from nutri_coach.containers import build_container


def test_build_container_creates_services(settings) -> None:
    container = build_container(settings)
    assert container.session.loaded is False
    assert container.product_lookup_service is not None
    assert container.session.tz.key == "UTC"
    asyncio.run(container.close_resources())
