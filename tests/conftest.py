"""Shared catalog fixtures."""

import copy

import pytest

from catalog.loader import load_catalog
from catalog.validation import validate

CATALOG_DATA = {
    "env": {"facetDefaults": {"web": "web"}},
    "repositories": {
        "spring-milestones": {
            "name": "Spring Milestones",
            "url": "https://repo.spring.io/milestone",
            "snapshotsEnabled": False,
        },
        "spring-snapshots": {
            "name": "Spring Snapshots",
            "url": "https://repo.spring.io/snapshot",
            "snapshotsEnabled": True,
        },
    },
    "boms": {
        "spring-cloud": {
            "groupId": "org.springframework.cloud",
            "artifactId": "spring-cloud-dependencies",
            "versionProperty": "spring-cloud.version",
            "order": 50,
            "mappings": [
                {"compatibilityRange": "[1.5.0.RELEASE,2.0.0.M1)", "version": "Edgware.SR3"},
                {
                    "compatibilityRange": "[2.0.0.M1,2.1.0.M1)",
                    "version": "Finchley.M9",
                    "repositories": ["spring-milestones"],
                },
            ],
        },
        "vaadin": {
            "groupId": "com.vaadin",
            "artifactId": "vaadin-bom",
            "version": "8.4.1",
        },
    },
    "dependencies": [
        {
            "name": "Web",
            "content": [
                {
                    "id": "web",
                    "name": "Web",
                    "description": "Full-stack web development with Tomcat and Spring MVC",
                    "facets": ["web", "json"],
                    "weight": 100,
                    "keywords": ["rest", "mvc"],
                    "links": [
                        {"rel": "guide", "href": "https://spring.io/guides/gs/rest-service/",
                         "description": "Building a RESTful Web Service"},
                        {"rel": "reference", "href": "https://docs.spring.io/{bootVersion}/web.html"},
                    ],
                },
                {
                    "id": "web-services",
                    "name": "Web Services",
                    "description": "Contract-first SOAP service development",
                    "aliases": ["ws"],
                },
                {
                    "id": "vaadin",
                    "name": "Vaadin",
                    "groupId": "com.vaadin",
                    "artifactId": "vaadin-spring-boot-starter",
                    "bom": "vaadin",
                    "facets": ["web"],
                    "compatibilityRange": "[1.5.0.RELEASE,2.1.0.M1)",
                },
            ],
        },
        {
            "name": "Cloud",
            "bom": "spring-cloud",
            "compatibilityRange": "[1.5.0.RELEASE,2.1.0.M1)",
            "content": [
                {
                    "id": "cloud-config-client",
                    "name": "Config Client",
                    "groupId": "org.springframework.cloud",
                    "artifactId": "spring-cloud-starter-config",
                    "keywords": ["configuration"],
                },
                {
                    "id": "cloud-eureka",
                    "name": "Eureka Discovery",
                    "groupId": "org.springframework.cloud",
                    "artifactId": "spring-cloud-starter-eureka",
                    "mappings": [
                        {"compatibilityRange": "[1.5.0.RELEASE,2.0.0.M1)"},
                        {
                            "compatibilityRange": "[2.0.0.M1,2.1.0.M1)",
                            "artifactId": "spring-cloud-starter-netflix-eureka-client",
                        },
                    ],
                },
            ],
        },
        {
            "name": "Other",
            "content": [
                {
                    "id": "foo",
                    "groupId": "org.acme",
                    "artifactId": "foo-spring-boot-starter",
                    "version": "1.0.0",
                    "mappings": [
                        {
                            "compatibilityRange": "[1.3.0.RELEASE,1.3.x.RELEASE]",
                            "artifactId": "foo-starter",
                            "version": "0.9.0",
                        },
                    ],
                },
                {
                    "id": "legacy",
                    "name": "Legacy",
                    "compatibilityRange": "[1.5.0.RC1,2.0.0.M1)",
                },
                {
                    "id": "actuator",
                    "name": "Actuator",
                    "weight": 50,
                    "keywords": ["monitoring", "health"],
                    "scope": "compile",
                },
            ],
        },
    ],
}


def catalog_from(data):
    """Load and validate a catalog mapping."""
    return validate(load_catalog(data))


def minimal_data(**sections):
    """Catalog mapping with one empty group plus the given sections."""
    data = {"dependencies": [{"name": "Core", "content": []}]}
    data.update(sections)
    return data


@pytest.fixture
def catalog_data():
    """Fresh deep copy of the sample catalog mapping."""
    return copy.deepcopy(CATALOG_DATA)


@pytest.fixture
def catalog(catalog_data):
    """Validated sample catalog."""
    return catalog_from(catalog_data)
