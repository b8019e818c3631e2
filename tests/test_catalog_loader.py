"""Tests for loading raw catalogs from mappings and YAML."""

import textwrap

import pytest
import yaml

from catalog.errors import CatalogValidationError
from catalog.loader import load_catalog, load_catalog_file, load_catalog_text
from constants import Constants

YAML_CATALOG = textwrap.dedent("""
    catalog:
      env:
        platformGroupId: org.acme.platform
        facetDefaults:
          web: web
      repositories:
        acme-snapshots:
          name: Acme Snapshots
          url: https://repo.acme.org/snapshot
          snapshotsEnabled: true
          releasesEnabled: false
      boms:
        acme:
          groupId: org.acme
          artifactId: acme-bom
          version: "2.10"
          order: 10
          repositories: acme-snapshots
      dependencies:
        - name: Web
          compatibilityRange: 1.5.0.RELEASE
          content:
            - id: web
              facets: [web]
              weight: 10
            - id: acme
              groupId: org.acme
              artifactId: acme-starter
              bom: acme
              scope: runtime
              aliases: [acme-starter]
              links:
                - rel: reference
                  href: https://docs.acme.org
              mappings:
                - compatibilityRange: "[1.5.0.RELEASE,2.0.0.M1)"
                  version: 1.0.0
                - compatibilityRange: 2.0.0.M1
                  repository: acme-snapshots
""")


def test_yaml_document_is_shaped():
    raw = load_catalog_text(YAML_CATALOG)
    assert raw.platform_group_id == "org.acme.platform"
    assert raw.facet_defaults == (("web", "web"),)

    repository = raw.repositories[0]
    assert repository.id == "acme-snapshots"
    assert repository.snapshots_enabled is True
    assert repository.releases_enabled is False

    bom = raw.boms[0]
    assert bom.version == "2.10"
    assert bom.order == 10
    assert bom.repositories == ("acme-snapshots",)

    group = raw.groups[0]
    assert group.name == "Web"
    assert group.version_range_text == "1.5.0.RELEASE"
    web, acme = group.content
    assert web.facets == ("web",)
    assert web.weight == 10
    assert acme.scope == "runtime"
    assert acme.aliases == ("acme-starter",)
    assert acme.links[0].rel == "reference"
    assert acme.links[0].templated is False
    assert acme.mappings[0].range_text == "[1.5.0.RELEASE,2.0.0.M1)"
    assert acme.mappings[0].overrides.version == "1.0.0"
    assert acme.mappings[0].version_range is None
    assert acme.mappings[1].is_implicit
    assert acme.mappings[1].overrides.repository_ids == ("acme-snapshots",)


def test_root_key_is_optional():
    data = yaml.safe_load(YAML_CATALOG)["catalog"]
    assert load_catalog(data) == load_catalog_text(YAML_CATALOG)


def test_version_range_key_is_accepted():
    raw = load_catalog({"dependencies": [{"name": "G", "content": [{"id": "a", "versionRange": "1.0.0.RELEASE"}]}]})
    assert raw.groups[0].content[0].version_range_text == "1.0.0.RELEASE"


def test_load_from_file(tmp_path):
    path = tmp_path / "catalog.yml"
    path.write_text(YAML_CATALOG, encoding="utf-8")
    raw = load_catalog_file(str(path))
    assert [dep.id for dep in raw.groups[0].content] == ["web", "acme"]


def test_load_from_environment(tmp_path, monkeypatch):
    path = tmp_path / "catalog.yml"
    path.write_text(YAML_CATALOG, encoding="utf-8")
    monkeypatch.setenv(Constants.ENV_CATALOG_FILE, str(path))
    assert load_catalog_file().boms[0].id == "acme"


def test_missing_path(monkeypatch):
    monkeypatch.delenv(Constants.ENV_CATALOG_FILE, raising=False)
    with pytest.raises(FileNotFoundError):
        load_catalog_file()


def test_malformed_entries_are_reported_together():
    data = {
        "dependencies": [
            {"name": "G", "content": [{"name": "no id"}, {"id": "ok", "weight": "heavy"}]},
            {"content": []},
        ],
        "boms": {"broken": {"groupId": "org.acme"}},
    }
    with pytest.raises(CatalogValidationError) as info:
        load_catalog(data)
    owners = [error.owner for error in info.value.errors]
    assert "G[0]" in owners
    assert "ok" in owners
    assert "group[1]" in owners
    assert "broken" in owners


def test_document_must_be_a_mapping():
    with pytest.raises(CatalogValidationError):
        load_catalog(["not", "a", "mapping"])


def test_non_mapping_entries_are_reported_together():
    data = {
        "dependencies": [],
        "boms": {"x": "oops", "ok": {"groupId": "g", "artifactId": "a", "version": "1"}},
        "repositories": {"r": ["not", "a", "mapping"]},
        "env": "production",
    }
    with pytest.raises(CatalogValidationError) as info:
        load_catalog(data)
    assert sorted(error.owner for error in info.value.errors) == ["env", "r", "x"]


def test_facet_defaults_must_be_a_mapping():
    with pytest.raises(CatalogValidationError) as info:
        load_catalog({"env": {"facetDefaults": ["web"]}})
    assert [error.owner for error in info.value.errors] == ["env"]


def test_unquoted_numeric_version_is_rejected():
    text = textwrap.dedent("""
        boms:
          acme:
            groupId: org.acme
            artifactId: acme-bom
            version: 2.10
        dependencies:
          - name: G
            content:
              - id: a
                groupId: g
                artifactId: a
                version: 1.5
    """)
    with pytest.raises(CatalogValidationError) as info:
        load_catalog_text(text)
    errors = info.value.errors
    assert [error.owner for error in errors] == ["a", "acme"]
    assert "quote" in errors[0].message
