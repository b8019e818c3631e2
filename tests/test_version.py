"""Tests for the Version model and its qualifier ordering."""

import pytest

from versioning.errors import InvalidVersionFormat, ParseError
from versioning.qualifier import QualifierKind
from versioning.version import Version


class TestVersionParse:
    """Parsing of version text."""

    def test_full_version(self):
        version = Version.parse("1.2.3.RELEASE")
        assert (version.major, version.minor, version.patch) == (1, 2, 3)
        assert version.qualifier.kind is QualifierKind.RELEASE

    def test_milestone_and_release_candidate_numbers(self):
        assert Version.parse("2.0.0.M7").qualifier.number == 7
        assert Version.parse("2.0.0.RC12").qualifier.number == 12

    def test_bare_version_is_unqualified_but_orders_as_release(self):
        bare = Version.parse("1.2.3")
        assert bare.qualifier is None
        assert bare.is_release
        assert bare == Version.parse("1.2.3.RELEASE")
        assert hash(bare) == hash(Version.parse("1.2.3.RELEASE"))

    def test_dash_separator_and_short_snapshot(self):
        milestone = Version.parse("3.0.0-M1")
        assert milestone == Version.parse("3.0.0.M1")
        assert Version.parse("3.0.0-SNAPSHOT").is_snapshot

    def test_wildcard_components(self):
        version = Version.parse("1.3.x.RELEASE")
        assert version.minor == 3
        assert version.patch is None
        assert version.has_wildcard

    @pytest.mark.parametrize("text", [
        "",
        "1.2",
        "1.a.3",
        "x.1.0",
        "1.2.3.FINAL",
        "1.2.3.rc1",
        "1.2.3.M",
        "1.2.3.release",
        "v1.2.3",
        "١.٠.٠",
        "1.0.0.M٢",
    ])
    def test_invalid_text(self, text):
        with pytest.raises(InvalidVersionFormat):
            Version.parse(text)

    def test_parse_error_is_a_value_error(self):
        with pytest.raises(ValueError):
            Version.parse("not-a-version")
        assert issubclass(InvalidVersionFormat, ParseError)

    def test_safely_parse(self):
        assert Version.safely_parse("nope") is None
        assert Version.safely_parse(None) is None
        assert Version.safely_parse("1.0.0.RC1") == Version.parse("1.0.0.RC1")


class TestVersionFormat:
    """Formatting back to text."""

    @pytest.mark.parametrize("text", [
        "1.0.0.M1",
        "1.5.10.RC2",
        "2.0.0.RELEASE",
        "2.0.0.BUILD-SNAPSHOT",
        "3.1.4",
        "3.1.4-SNAPSHOT",
        "1.3.x.RELEASE",
    ])
    def test_round_trip(self, text):
        version = Version.parse(text)
        assert str(version) == text
        assert Version.parse(str(version)) == version


class TestVersionOrdering:
    """Total ordering of versions."""

    def test_qualifier_order_for_same_triple(self):
        chain = [Version.parse(t) for t in (
            "1.0.0.M1", "1.0.0.M9", "1.0.0.RC1", "1.0.0.RELEASE", "1.0.0.BUILD-SNAPSHOT",
        )]
        for lower, higher in zip(chain, chain[1:]):
            assert lower < higher
            assert not higher < lower
        assert chain[0] < chain[-1]

    def test_milestone_number_is_numeric(self):
        assert Version.parse("1.0.0.M2") < Version.parse("1.0.0.M12")
        assert Version.parse("1.0.0.RC9") < Version.parse("1.0.0.RC10")

    def test_numeric_components_win_over_qualifier(self):
        assert Version.parse("1.0.0.BUILD-SNAPSHOT") < Version.parse("1.0.1.M1")
        assert Version.parse("1.9.0.RELEASE") < Version.parse("1.10.0.M1")
        assert Version.parse("1.99.99.RELEASE") < Version.parse("2.0.0.M1")

    def test_wildcard_is_top_of_its_line(self):
        wildcard = Version.parse("1.3.x.RELEASE")
        assert Version.parse("1.3.99.RELEASE") < wildcard
        assert wildcard < Version.parse("1.4.0.M1")

    def test_sorting(self):
        texts = ["2.0.0.RELEASE", "1.5.0.RC1", "2.0.0.M2", "1.5.0.RELEASE", "2.0.0"]
        ordered = [str(v) for v in sorted(Version.parse(t) for t in texts)]
        assert ordered == ["1.5.0.RC1", "1.5.0.RELEASE", "2.0.0.M2", "2.0.0.RELEASE", "2.0.0"]

    def test_set_deduplicates_equal_versions(self):
        assert len({Version.parse("1.0.0"), Version.parse("1.0.0.RELEASE")}) == 1
