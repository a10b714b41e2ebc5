"""
Unit test fixtures and helpers.

Provides factories for SRTM entities, a fresh catalog repository and
sample STIG documents. Nothing here touches the network or the real
STIG library directory.
"""

from typing import Callable

import pytest

from srtm.models import SecurityRequirement, SystemCategorization, SystemDesignElement
from srtm.repositories import StigCatalogRepository

SAMPLE_XCCDF = """<?xml version="1.0" encoding="UTF-8"?>
<Benchmark xmlns="http://checklists.nist.gov/xccdf/1.1" xmlns:dc="http://purl.org/dc/elements/1.1/"
           id="PostgreSQL_9-x_STIG">
  <status date="2023-09-12">accepted</status>
  <title>PostgreSQL 9.x Security Technical Implementation Guide</title>
  <version>2</version>
  <Group id="V-214048">
    <title>SRG-APP-000001-DB-000031</title>
    <Rule id="SV-214048r508027_rule" severity="medium" weight="10.0">
      <version>PGS9-00-000100</version>
      <title>PostgreSQL must limit the number of concurrent sessions.</title>
      <description>&lt;VulnDiscussion&gt;Database management includes the ability to control the number of users and user sessions.&lt;/VulnDiscussion&gt;&lt;FalsePositives&gt;&lt;/FalsePositives&gt;</description>
      <reference>
        <dc:title>DPMS Target PostgreSQL 9.x</dc:title>
        <dc:subject>NIST SP 800-53 AC-10</dc:subject>
      </reference>
      <ident system="http://cyber.mil/cci">CCI-000054</ident>
      <fixtext fixref="F-15263r360802_fix">Set max_connections in postgresql.conf.</fixtext>
      <check system="C-15263r360801_chk">
        <check-content>Run SHOW max_connections; and verify the value.</check-content>
      </check>
    </Rule>
  </Group>
  <Group id="V-214049">
    <title>SRG-APP-000023-DB-000001</title>
    <Rule id="SV-214049r508030_rule" severity="high">
      <title>PostgreSQL must enforce approved authorizations.</title>
    </Rule>
  </Group>
  <Group id="V-000000">
    <title>Group without a rule</title>
  </Group>
</Benchmark>
"""

SAMPLE_CSV = (
    "Vuln ID,Rule ID,STIG ID,Severity,Rule Title,Discussion,Check Content,Fix Text,CCI\n"
    "V-214048,SV-214048r1_rule,PGS9-00-000100,CAT II,PostgreSQL must limit the number of connections.,"
    "Limits reduce denial of service risk.,Run SHOW max_connections;,Set max_connections.,"
    '"CCI-000054, CCI-000055"\n'
    "V-214050,SV-214050r1_rule,PGS9-00-000300,high,PostgreSQL must use approved authentication.,,,,\n"
)


@pytest.fixture
def make_requirement() -> Callable[..., SecurityRequirement]:
    """Factory for security requirements with sensible defaults."""
    counter = {"value": 0}

    def _make(**overrides) -> SecurityRequirement:
        counter["value"] += 1
        data = {"id": f"REQ-{counter['value']:03d}", "title": "", "description": ""}
        data.update(overrides)
        return SecurityRequirement(**data)

    return _make


@pytest.fixture
def make_design_element() -> Callable[..., SystemDesignElement]:
    """Factory for system design elements with sensible defaults."""
    counter = {"value": 0}

    def _make(**overrides) -> SystemDesignElement:
        counter["value"] += 1
        data = {"id": f"DE-{counter['value']:03d}", "name": "", "description": ""}
        data.update(overrides)
        return SystemDesignElement(**data)

    return _make


@pytest.fixture
def make_categorization() -> Callable[..., SystemCategorization]:
    """Factory for NIST SP 800-60 information types."""

    def _make(**overrides) -> SystemCategorization:
        data = {"category": "C.3.5.1", "name": "System Development"}
        data.update(overrides)
        return SystemCategorization(**data)

    return _make


@pytest.fixture
def repository() -> StigCatalogRepository:
    """Catalog repository seeded with the static catalog (730-day release window)."""
    return StigCatalogRepository(max_age_days=730)


@pytest.fixture
def sample_xccdf() -> str:
    return SAMPLE_XCCDF


@pytest.fixture
def sample_csv() -> str:
    return SAMPLE_CSV
