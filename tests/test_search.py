"""Tests for keyword search and ranking."""

from resolution.resolver import MetadataResolver
from resolution.search import rank_by_keyword, score, sort_by_weight, tokenize


def ids(dependencies):
    return [dep.id for dep in dependencies]


class TestSearchByKeyword:
    """Search through the resolver."""

    def setup_method(self):
        self.platform_version = "2.0.0.RELEASE"

    def test_exact_alias_ranks_first(self, catalog):
        results = MetadataResolver(catalog).search_by_keyword(self.platform_version, "ws")
        assert ids(results) == ["web-services"]

    def test_id_match_outranks_partial_matches(self, catalog):
        results = MetadataResolver(catalog).search_by_keyword(self.platform_version, "web")
        assert ids(results) == ["web", "web-services"]

    def test_keyword_match(self, catalog):
        results = MetadataResolver(catalog).search_by_keyword(self.platform_version, "configuration")
        assert ids(results) == ["cloud-config-client"]

    def test_every_token_must_match(self, catalog):
        resolver = MetadataResolver(catalog)
        assert ids(resolver.search_by_keyword(self.platform_version, "health monitoring")) == ["actuator"]
        assert resolver.search_by_keyword(self.platform_version, "health soap") == []

    def test_case_insensitive(self, catalog):
        results = MetadataResolver(catalog).search_by_keyword(self.platform_version, "EUREKA")
        assert ids(results) == ["cloud-eureka"]

    def test_absent_dependencies_are_not_found(self, catalog):
        resolver = MetadataResolver(catalog)
        assert resolver.search_by_keyword("2.0.0.RELEASE", "legacy") == []
        assert ids(resolver.search_by_keyword("1.5.2.RELEASE", "legacy")) == ["legacy"]

    def test_blank_text_returns_available_list(self, catalog):
        resolver = MetadataResolver(catalog)
        assert resolver.search_by_keyword(self.platform_version, "  ") == \
            resolver.list_available_dependencies(self.platform_version)


class TestRanking:
    """Scoring helpers."""

    def test_tokenize(self):
        assert tokenize("  Spring  WEB ") == ["spring", "web"]

    def test_score_is_zero_unless_all_tokens_match(self, catalog):
        web = MetadataResolver(catalog).resolve_dependency("web", "2.0.0.RELEASE")
        assert score(web, ["web"]) > score(web, ["mvc"]) > 0
        assert score(web, ["web", "kafka"]) == 0

    def test_ties_fall_back_to_weight_then_name(self, catalog):
        resolver = MetadataResolver(catalog)
        available = resolver.list_available_dependencies("2.0.0.RELEASE")
        assert ids(sort_by_weight(list(reversed(available)))) == ids(available)
        tied = rank_by_keyword(available, "spring")
        assert ids(tied) == ids(sort_by_weight(tied))
