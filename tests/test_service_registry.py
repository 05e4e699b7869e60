"""
Unit tests for the backend URL registry and routing policy.
"""

import pytest

from core.domain.models import Modality
from core.exceptions import BioSdkClientError, ConfigurationError
from core.services.service_registry import DEFAULT, ServiceRegistry, build_registry


class TestBuildRegistry:
    """Test build_registry."""

    def test_collects_format_url_keys(self):
        """Test that only format.url.* keys become endpoints."""
        urls = build_registry({
            "format.url.default": "http://d",
            "format.url.ISO19794_4_2011": "http://finger",
            "threshold": "40",
        })
        assert urls == {"default": "http://d", "ISO19794_4_2011": "http://finger"}

    def test_default_from_env_when_missing(self):
        """Test that the env fallback is used as default."""
        urls = build_registry({"format.url.x": "http://x"}, env_default="http://env")
        assert urls[DEFAULT] == "http://env"
        assert urls["x"] == "http://x"

    def test_explicit_default_wins_over_env(self):
        """Test that init params take precedence over the env fallback."""
        urls = build_registry({"format.url.default": "http://d"}, env_default="http://env")
        assert urls[DEFAULT] == "http://d"

    def test_default_promoted_from_first_entry(self):
        """Test that the first entry is promoted when no default exists."""
        urls = build_registry({
            "format.url.a": "http://a",
            "format.url.b": "http://b",
        })
        assert urls[DEFAULT] == "http://a"
        assert list(urls) == ["a", "b", "default"]

    def test_env_only(self):
        """Test that the env fallback alone is enough."""
        assert build_registry({"threshold": "1"}, env_default="http://env") == {"default": "http://env"}

    @pytest.mark.parametrize("params", [{}, None, {"threshold": "40"}])
    def test_empty_registry_fails(self, params):
        """Test that no URL at all raises ConfigurationError."""
        with pytest.raises(ConfigurationError) as exc_info:
            build_registry(params)
        assert isinstance(exc_info.value, BioSdkClientError)

    def test_always_has_default(self):
        """Test that any non-empty mapping ends up with a default key."""
        for params in (
            {"format.url.one": "http://1"},
            {"format.url.one": "http://1", "format.url.two": "http://2"},
            {"x.format.url.three": "http://3"},
        ):
            assert DEFAULT in build_registry(params)


class TestResolve:
    """Test ServiceRegistry.resolve."""

    @pytest.fixture
    def registry(self):
        return ServiceRegistry(endpoints={"x": "urlX", "default": "urlD"})

    def test_format_flag_selects_backend(self, registry):
        """Test that <MODALITY>.format routes to the named backend."""
        assert registry.resolve(Modality.FACE, {"FACE.format": "x"}) == "urlX"

    def test_without_format_flag_uses_default(self, registry):
        """Test that missing format flag falls back to default."""
        assert registry.resolve(Modality.FACE, {"other": "x"}) == "urlD"

    def test_flag_key_and_value_case_insensitive(self, registry):
        """Test case-insensitive matching of flag key and format name."""
        assert registry.resolve(Modality.FACE, {"face.FORMAT": "X"}) == "urlX"

    def test_unknown_format_uses_default(self, registry):
        """Test that a format with no backend falls back to default."""
        assert registry.resolve(Modality.FACE, {"FACE.format": "nope"}) == "urlD"

    def test_flag_for_other_modality_ignored(self, registry):
        """Test that a flag for another modality does not route."""
        assert registry.resolve(Modality.FINGER, {"FACE.format": "x"}) == "urlD"

    @pytest.mark.parametrize("flags", [None, {}])
    def test_no_modality_no_flags(self, registry, flags):
        """Test that nothing to go on resolves to default."""
        assert registry.resolve(None, flags) == "urlD"

    def test_no_modality_sniffs_flag_keys(self, registry):
        """Test modality sniffing from flag keys."""
        assert registry.resolve(None, {"face.format": "x"}) == "urlX"

    def test_sniff_priority_within_key(self):
        """Test that finger beats iris and face when one key names several."""
        registry = ServiceRegistry(endpoints={"f": "urlF", "default": "urlD"})
        assert registry.resolve(None, {"finger_face.format": "f", "FINGER.format": "f"}) == "urlF"

    def test_sniffed_modality_without_matching_format(self, registry):
        """Test that a sniffed modality with no format flag uses default."""
        assert registry.resolve(None, {"irisQuality": "high"}) == "urlD"


class TestResolveFor:
    """Test ServiceRegistry.resolve_for."""

    @pytest.fixture
    def registry(self):
        return ServiceRegistry.from_init_params({
            "format.url.default": "urlD",
            "format.url.finger-iso": "urlF",
            "format.url.iris-iso": "urlI",
        })

    def test_uses_first_modality(self, registry):
        """Test routing by the first modality in the list."""
        flags = {"FINGER.format": "finger-iso", "IRIS.format": "iris-iso"}
        assert registry.resolve_for([Modality.IRIS, Modality.FINGER], flags) == "urlI"

    def test_empty_list_sniffs_flags(self, registry):
        """Test flag sniffing when no modality is given."""
        assert registry.resolve_for([], {"FINGER.format": "finger-iso"}) == "urlF"
        assert registry.resolve_for(None, {"iris.format": "iris-iso"}) == "urlI"

    def test_empty_list_without_sniffing(self, registry):
        """Test that sniffing can be disabled."""
        flags = {"FINGER.format": "finger-iso"}
        assert registry.resolve_for([], flags, sniff_flags=False) == "urlD"

    def test_urls_in_registry_order(self, registry):
        """Test that urls() keeps insertion order."""
        assert list(registry.urls()) == ["urlD", "urlF", "urlI"]

    def test_missing_default_raises(self):
        """Test that a hand-built registry without default raises."""
        registry = ServiceRegistry(endpoints={"x": "urlX"})
        with pytest.raises(ConfigurationError):
            _ = registry.default_url
