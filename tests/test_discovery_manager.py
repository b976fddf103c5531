"""Tests for strategy selection in the discovery manager."""

import pytest

from discovery.manager import BridgeDiscovery
from errors import DiscoveryError, NoCandidatesError

from helpers import StaticProvider


def make_discovery(config, mdns, directory):
    return BridgeDiscovery(config["discovery"], providers={"mdns": mdns, "directory": directory})


class TestBridgeDiscovery:

    @pytest.mark.asyncio
    async def test_auto_uses_mdns_when_it_finds_a_bridge(self, config):
        mdns = StaticProvider("mdns", ["192.168.1.20"])
        directory = StaticProvider("directory", ["192.168.1.99"])

        result = await make_discovery(config, mdns, directory).discover("auto")

        assert result.method == "mdns"
        assert result.addresses == ["192.168.1.20"]
        assert len(result.candidates) == 1
        assert directory.calls == 0

    @pytest.mark.asyncio
    async def test_auto_falls_back_to_directory_on_empty_mdns(self, config):
        mdns = StaticProvider("mdns", [])
        directory = StaticProvider("directory", ["192.168.1.99", "192.168.1.98"])

        result = await make_discovery(config, mdns, directory).discover("auto")

        assert result.method == "directory"
        assert result.addresses == ["192.168.1.99", "192.168.1.98"]
        assert mdns.calls == 1

    @pytest.mark.asyncio
    async def test_auto_falls_back_when_mdns_cannot_start(self, config):
        mdns = StaticProvider("mdns", [], error=DiscoveryError("bind failed"))
        directory = StaticProvider("directory", ["192.168.1.99"])

        result = await make_discovery(config, mdns, directory).discover("auto")

        assert result.addresses == ["192.168.1.99"]

    @pytest.mark.asyncio
    async def test_directory_errors_surface_in_auto(self, config):
        mdns = StaticProvider("mdns", [])
        directory = StaticProvider("directory", [], error=NoCandidatesError())

        with pytest.raises(NoCandidatesError):
            await make_discovery(config, mdns, directory).discover("auto")

    @pytest.mark.asyncio
    async def test_explicit_mdns_returns_empty_without_fallback(self, config):
        mdns = StaticProvider("mdns", [])
        directory = StaticProvider("directory", ["192.168.1.99"])

        result = await make_discovery(config, mdns, directory).discover("mdns")

        assert result.candidates == []
        assert directory.calls == 0

    @pytest.mark.asyncio
    async def test_explicit_mdns_failure_surfaces(self, config):
        mdns = StaticProvider("mdns", [], error=DiscoveryError("bind failed"))
        directory = StaticProvider("directory", ["192.168.1.99"])

        with pytest.raises(DiscoveryError):
            await make_discovery(config, mdns, directory).discover("mdns")

    @pytest.mark.asyncio
    async def test_default_method_comes_from_config(self, config):
        config["discovery"]["method"] = "directory"
        mdns = StaticProvider("mdns", ["192.168.1.20"])
        directory = StaticProvider("directory", ["192.168.1.99"])

        result = await make_discovery(config, mdns, directory).discover()

        assert result.method == "directory"
        assert mdns.calls == 0

    @pytest.mark.asyncio
    async def test_unknown_method(self, config):
        discovery = make_discovery(config, StaticProvider("mdns", []), StaticProvider("directory", []))

        with pytest.raises(ValueError):
            await discovery.discover("bluetooth")

    def test_builds_both_strategies_by_default(self, config):
        discovery = BridgeDiscovery(config["discovery"])

        assert set(discovery.providers) == {"mdns", "directory"}
        assert discovery.providers["mdns"].service_type == "_hue._tcp.local."
