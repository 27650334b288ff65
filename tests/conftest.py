import textwrap
from pathlib import Path
from typing import List, Optional

import pytest
import respx
import yaml
from click.testing import CliRunner

from admxgen.policy.models import Policy, PolicyDocument
from admxgen.utils.cancellation import CancellationToken


# Skip integration tests unless explicitly enabled
def pytest_addoption(parser):
    parser.addoption("--integration", action="store_true", default=False, help="Run integration tests")

def pytest_collection_modifyitems(config, items):
    if not config.getoption("--integration"):
        skip_integration = pytest.mark.skip(reason="need --integration option to run")
        for item in items:
            if "integration" in item.keywords:
                item.add_marker(skip_integration)


@pytest.fixture(autouse=True)
def _isolate_global_respx_routes():
    """Drop routes a test added to the global respx router outside an active mock."""
    respx.mock.snapshot()
    yield
    respx.mock.rollback()


SAMPLE_DOCUMENT = textwrap.dedent(r"""
    namespace: Contoso.Browser
    policies:
      - name: HomePage
        display_name: Home page
        display_name_ref: $(string.HomePage)
        explain_text: |
          Sets the home page.
          Use <https://contoso.example> & more.
        class: User
        registry_key: Software\Policies\Contoso\Browser
        registry_value_name: HomePageEnabled
        enabled_value: {decimal: 1}
        disabled_value: {delete: true}
        supported_on: windows:SUPPORTED_Win10
        elements:
          - kind: text
            id: HomePageUrl
            value_name: HomePage
            required: true
            max_length: 2048
          - kind: enum
            id: StartupMode
            value_name: StartupMode
            items:
              - display_name: New tab
                display_name_ref: $(string.NewTab)
                value: {decimal: 0}
              - display_name: Restore
                value: {string: restore}
          - kind: decimal
            id: CacheSize
            value_name: CacheSize
            min_value: 1
            max_value: 500
          - kind: boolean
            id: class
            value_name: ShowButton
            true_value: {decimal: 1}
            false_value: {decimal: 0}
          - kind: list
            id: Blocked-Sites
            registry_key: Software\Policies\Contoso\Browser\Blocked
          - kind: longDecimal
            id: Quota
            value_name: Quota
            max_value: 10000000000
          - kind: multiText
            id: Notes
            value_name: Notes
      - name: 2FA Required
        namespace: Contoso.Security
        class: Machine
        registry_key: Software\Policies\Contoso\Security
        registry_value_name: Require2FA
""").lstrip()


class StaticPolicyModel:
    """In-memory policy model; loaded unless told otherwise."""

    def __init__(self, policies, loaded: bool = True):
        self.policies = policies
        self._loaded = loaded
        self.load_calls = 0

    @property
    def loaded(self) -> bool:
        return self._loaded

    async def load(self, token: Optional[CancellationToken] = None) -> None:
        self.load_calls += 1
        self._loaded = True

    def query(self):
        return self.policies


@pytest.fixture
def sample_document_path(tmp_path: Path) -> Path:
    path = tmp_path / "browser.yaml"
    path.write_text(SAMPLE_DOCUMENT, encoding="utf-8")
    return path


@pytest.fixture
def sample_policies() -> List[Policy]:
    return PolicyDocument.model_validate(yaml.safe_load(SAMPLE_DOCUMENT)).policies


@pytest.fixture
def sample_model(sample_policies) -> StaticPolicyModel:
    return StaticPolicyModel(sample_policies)


@pytest.fixture
def cli_runner():
    return CliRunner()
