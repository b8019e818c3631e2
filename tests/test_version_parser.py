"""Tests for VersionParser wildcard handling and version providers."""

from versioning.parser import VersionParser, parse_range, parse_version
from versioning.provider import StaticVersionProvider
from versioning.version import Version

KNOWN = [
    "1.3.0.RELEASE",
    "1.3.5.RELEASE",
    "1.3.6.BUILD-SNAPSHOT",
    "1.4.0.M2",
    "1.4.0.RELEASE",
    "2.0.0.M1",
]


def test_wildcard_upper_bound_is_concretised():
    parser = VersionParser([Version.parse(t) for t in KNOWN])
    version_range = parser.parse_range("[1.3.0.RELEASE,1.3.x.RELEASE]")
    assert version_range.upper == Version.parse("1.3.5.RELEASE")
    assert version_range.upper_inclusive
    assert not version_range.contains(Version.parse("1.3.6.BUILD-SNAPSHOT"))


def test_wildcard_keeps_qualifier_family():
    parser = VersionParser([Version.parse(t) for t in KNOWN])
    assert parser.parse("1.3.x.BUILD-SNAPSHOT") == Version.parse("1.3.6.BUILD-SNAPSHOT")
    assert parser.parse("1.x.x.M1") == Version.parse("1.4.0.M2")


def test_wildcard_without_match_is_kept():
    parser = VersionParser([Version.parse(t) for t in KNOWN])
    version = parser.parse("1.5.x.RELEASE")
    assert version.has_wildcard
    assert str(version) == "1.5.x.RELEASE"


def test_parser_without_known_versions_is_purely_syntactic():
    version_range = VersionParser().parse_range("[1.3.0.RELEASE,1.3.x.RELEASE]")
    assert version_range.upper.has_wildcard


def test_module_shorthands():
    assert parse_version("1.0.0.RC1") == Version.parse("1.0.0.RC1")
    assert str(parse_range("[1.0.0.RELEASE,2.0.0.M1)")) == "[1.0.0.RELEASE,2.0.0.M1)"


def test_static_provider_orders_and_picks_default_release():
    provider = StaticVersionProvider(["2.0.0.M1", "1.4.0.RELEASE", "1.5.0.BUILD-SNAPSHOT", "1.3.0.RELEASE"])
    assert [str(v) for v in provider.list_known_platform_versions()] == [
        "1.3.0.RELEASE", "1.4.0.RELEASE", "1.5.0.BUILD-SNAPSHOT", "2.0.0.M1",
    ]
    assert provider.default_version() == Version.parse("1.4.0.RELEASE")


def test_static_provider_without_release_falls_back_to_highest():
    provider = StaticVersionProvider(["2.0.0.M1", "2.0.0.M3"])
    assert provider.default_version() == Version.parse("2.0.0.M3")
    assert StaticVersionProvider().default_version() is None
