"""Tests for location resolution."""

import asyncio

import pytest
import responses

from shul_board.errors import LocationUnavailable
from shul_board.location import DEFAULT_COORDINATE, IpGeolocator, LocationResolver
from shul_board.models import Coordinate

GEO_URL = "http://ip-api.com/json/"
TEL_AVIV = Coordinate(latitude=32.0853, longitude=34.7818)


@responses.activate
def test_geolocator_success():
    responses.add(
        responses.GET,
        GEO_URL,
        json={"status": "success", "lat": 32.0853, "lon": 34.7818},
        status=200,
    )
    assert IpGeolocator().get_position() == TEL_AVIV


@responses.activate
def test_geolocator_denied():
    responses.add(
        responses.GET,
        GEO_URL,
        json={"status": "fail", "message": "private range"},
        status=200,
    )
    with pytest.raises(LocationUnavailable, match="private range"):
        IpGeolocator().get_position()


@responses.activate
def test_geolocator_http_error():
    responses.add(responses.GET, GEO_URL, status=503)
    with pytest.raises(LocationUnavailable):
        IpGeolocator().get_position()


@responses.activate
def test_geolocator_invalid_coordinate():
    responses.add(
        responses.GET,
        GEO_URL,
        json={"status": "success", "lat": 123.0, "lon": 34.7},
        status=200,
    )
    with pytest.raises(LocationUnavailable):
        IpGeolocator().get_position()


def test_resolve_without_capability():
    resolver = LocationResolver(None)
    assert asyncio.run(resolver.resolve()) == DEFAULT_COORDINATE


def test_resolve_success():
    async def locate():
        return TEL_AVIV

    assert asyncio.run(LocationResolver(locate).resolve()) == TEL_AVIV


def test_resolve_denied_uses_default():
    async def locate():
        raise LocationUnavailable("denied")

    assert asyncio.run(LocationResolver(locate).resolve()) == DEFAULT_COORDINATE


def test_resolve_is_single_shot():
    calls = []

    async def locate():
        calls.append(1)
        return TEL_AVIV

    async def scenario():
        resolver = LocationResolver(locate)
        first = await resolver.resolve()
        second = await resolver.resolve()
        return first, second

    assert asyncio.run(scenario()) == (TEL_AVIV, TEL_AVIV)
    assert len(calls) == 1


def test_resolve_timeout_delivers_late_fix():
    late_fixes = []

    async def scenario():
        release = asyncio.Event()

        async def locate():
            await release.wait()
            return TEL_AVIV

        resolver = LocationResolver(locate, timeout=0.01)
        coord = await resolver.resolve(on_late_fix=late_fixes.append)
        assert late_fixes == []

        release.set()
        for _ in range(5):
            await asyncio.sleep(0)
        return coord

    assert asyncio.run(scenario()) == DEFAULT_COORDINATE
    assert late_fixes == [TEL_AVIV]


def test_resolve_timeout_late_failure_is_ignored():
    late_fixes = []

    async def scenario():
        release = asyncio.Event()

        async def locate():
            await release.wait()
            raise LocationUnavailable("denied")

        resolver = LocationResolver(locate, timeout=0.01)
        coord = await resolver.resolve(on_late_fix=late_fixes.append)
        release.set()
        for _ in range(5):
            await asyncio.sleep(0)
        return coord

    assert asyncio.run(scenario()) == DEFAULT_COORDINATE
    assert late_fixes == []


def test_custom_default():
    resolver = LocationResolver(None, default=TEL_AVIV)
    assert asyncio.run(resolver.resolve()) == TEL_AVIV


def test_pending_reading_tracked_until_it_arrives():
    async def scenario():
        release = asyncio.Event()

        async def locate():
            await release.wait()
            return TEL_AVIV

        resolver = LocationResolver(locate, timeout=0.01)
        assert resolver.pending is None
        await resolver.resolve()
        assert resolver.pending is not None

        release.set()
        await asyncio.wait([resolver.pending])
        await asyncio.sleep(0)
        return resolver

    resolver = asyncio.run(scenario())
    assert resolver.pending is None
