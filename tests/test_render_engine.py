"""
Unit tests for the template rendering engine.
"""
import io

import pytest
from conftest import StaticPolicyModel

from admxgen.compiler.normalize import normalize_whitespace
from admxgen.policy.models import Policy, TextElementItem
from admxgen.render.engine import SourceRenderer, render_source
from admxgen.render.templates import BANNER, PRAGMA
from admxgen.utils.cancellation import CancellationToken, OperationCancelledError

RT = "global::Contoso.Policies.Runtime"


def render(model, assembly_name="Contoso.Policies", token=None) -> str:
    sink = io.StringIO()
    render_source(model, assembly_name, sink, token)
    return sink.getvalue()


class TestRenderStructure:
    """Overall layout of the rendered compilation unit."""

    def test_banner_pragma_and_outer_namespace(self, sample_model):
        source = render(sample_model)
        assert source.startswith(BANNER)
        assert PRAGMA in source
        assert "namespace Contoso.Policies\n{\n" in source
        assert source.endswith("}\n")
        assert source.index(PRAGMA) < source.index("namespace Contoso.Policies")

    def test_supplement_rendered_once_after_policies(self, sample_model):
        source = render(sample_model)
        assert source.count("public static class GroupPolicyMethods") == 1
        assert source.count("namespace Runtime") == 1
        assert source.index("public sealed class _2FARequired") < source.index("namespace Runtime")
        for marker in (
            "public enum PolicyClass",
            "public interface IPolicyDefinition",
            "public sealed class GroupPolicyObject : IDisposable",
            "internal interface IGroupPolicyObject",
            "internal static class Helpers",
        ):
            assert marker in source

    def test_policies_in_model_order(self, sample_model):
        source = render(sample_model)
        assert source.index("class HomePage ") < source.index("class _2FARequired ")

    def test_policy_namespaces_import_runtime(self, sample_model):
        source = render(sample_model)
        assert "namespace Contoso.Browser\n{" in source
        assert "namespace Contoso.Security\n{" in source
        assert source.count("using global::Contoso.Policies.Runtime;") == 2

    def test_braces_balance(self, sample_model):
        source = normalize_whitespace(render(sample_model))
        # No policy text in the sample contains braces.
        assert source.count("{") == source.count("}")
        assert source.splitlines()[-1] == "}"

    def test_rendering_is_deterministic(self, sample_policies):
        first = render(StaticPolicyModel(sample_policies))
        second = render(StaticPolicyModel(sample_policies))
        assert first == second

    def test_single_policy_query_result(self):
        model = StaticPolicyModel(Policy(name="Solo", namespace="A.B", registry_key="Software\\A"))
        source = render(model)
        assert f"public sealed class Solo : {RT}.IPolicyDefinition, {RT}.IPolicyValueSource" in source

    def test_policy_without_namespace_gets_default(self):
        model = StaticPolicyModel([Policy(name="Loose")])
        assert "namespace Policies\n{" in render(model)


class TestPolicyMembers:
    """Members generated for the sample policies."""

    @pytest.fixture
    def source(self, sample_model):
        return render(sample_model)

    def test_policy_metadata(self, source):
        assert 'public const string PolicyName = @"HomePage";' in source
        assert 'public const string ResourceId = @"HomePage";' in source
        assert 'public string DisplayName => @"Home page";' in source
        assert f"public {RT}.PolicyClass Class => {RT}.PolicyClass.User;" in source
        assert f"public {RT}.PolicyClass Class => {RT}.PolicyClass.Machine;" in source
        assert 'public string RegistryKey => @"Software\\Policies\\Contoso\\Browser";' in source
        assert 'public string SupportedOn => @"windows:SUPPORTED_Win10";' in source

    def test_enabled_and_disabled_values(self, source):
        assert "public object EnabledValue => 1u;" in source
        # delete-sentinel
        assert "public object DisabledValue => null;" in source
        # defaults for the second policy
        assert "public object DisabledValue => 0u;" in source

    def test_documentation_is_escaped(self, source):
        assert "/// Use &lt;https://contoso.example&gt; &amp; more." in source
        assert "/// Home page" in source
        assert "/// 2FA Required" in source

    def test_text_element(self, source):
        assert "public string HomePageUrl { get; set; }" in source
        assert f"{RT}.Helpers.EnsureLength(HomePageUrl, 2048, nameof(HomePageUrl))" in source
        assert '"\'{0}\' is required.", nameof(HomePageUrl)' in source

    def test_enum_element(self, source):
        assert "public StartupModeOption? StartupMode { get; set; }" in source
        assert "public enum StartupModeOption" in source
        assert "NewTab = 0," in source
        assert "Restore = 1," in source
        assert "0u," in source
        assert '@"restore",' in source
        assert "StartupModeValues[(int)StartupMode.Value]" in source

    def test_decimal_element(self, source):
        assert "public uint? CacheSize { get; set; }" in source
        assert f"{RT}.Helpers.EnsureRange(CacheSize.Value, 1u, 500u, nameof(CacheSize))" in source

    def test_keyword_element_id_is_verbatim_identifier(self, source):
        assert "public bool? @class { get; set; }" in source
        assert "@class.Value ? (object)1u : (object)0u" in source

    def test_list_long_decimal_and_multi_text_elements(self, source):
        assert "public global::System.Collections.Generic.IList<string> BlockedSites { get; set; }" in source
        assert f'{RT}.PolicyElementKind.List, @"Software\\Policies\\Contoso\\Browser\\Blocked", null' in source
        assert f"{RT}.Helpers.EnsureRange(Quota.Value, 0uL, 10000000000uL, nameof(Quota))" in source
        assert "public string[] Notes { get; set; }" in source
        assert f"{RT}.Helpers.EnsureStrings(Notes, 1023, 0, nameof(Notes))" in source

    def test_element_inherits_policy_registry_key(self, source):
        assert (
            f'new {RT}.PolicyElement(@"HomePageUrl", {RT}.PolicyElementKind.Text, '
            '@"Software\\Policies\\Contoso\\Browser", @"HomePage", expandable: false)'
        ) in source

    def test_element_named_like_reserved_member_is_renamed(self):
        policy = Policy(name="P", namespace="N", elements=[TextElementItem(id="Name")])
        source = render(StaticPolicyModel([policy]))
        assert "public string NameSetting0 { get; set; }" in source
        assert "public string Name => PolicyName;" in source

    def test_element_whose_derived_names_collide_is_renamed(self):
        policy = Policy(name="ModeOption", namespace="N", elements=[TextElementItem(id="Mode")])
        source = render(StaticPolicyModel([policy]))
        assert "public sealed class ModeOption " in source
        assert "public string ModeSetting0 { get; set; }" in source

    def test_element_named_like_inherited_member_is_renamed(self):
        policy = Policy(name="P", namespace="N", elements=[TextElementItem(id="GetType")])
        source = render(StaticPolicyModel([policy]))
        assert "public string GetTypeSetting0 { get; set; }" in source


class TestClassNames:
    @pytest.mark.parametrize("name, class_name", [
        ("Name", "NamePolicy"),
        ("Class", "ClassPolicy"),
        ("DisplayName", "DisplayNamePolicy"),
        ("Helpers", "HelpersPolicy"),
        ("PolicyElement", "PolicyElementPolicy"),
        ("Home Page", "HomePage"),
    ])
    def test_colliding_class_names_get_suffix(self, name, class_name):
        source = render(StaticPolicyModel([Policy(name=name, namespace="N")]))
        assert f"public sealed class {class_name} : {RT}.IPolicyDefinition" in source
        assert f'public const string PolicyName = @"{name}";' in source

    def test_runtime_references_are_qualified(self):
        policy = Policy(name="CultureInfo", namespace="N", elements=[TextElementItem(id="Text", required=True)])
        source = render(StaticPolicyModel([policy]))
        assert "public sealed class CultureInfo " in source
        assert "global::System.Globalization.CultureInfo.InvariantCulture" in source
        assert "throw new global::System.InvalidOperationException(" in source
        assert f"public global::System.Collections.Generic.IEnumerable<{RT}.PolicyValue> GetValues()" in source


class TestEmptyModel:
    def test_supplement_without_policies(self):
        source = normalize_whitespace(render(StaticPolicyModel([])))
        assert source.startswith(BANNER)
        assert "namespace Contoso.Policies\n{\n    namespace Runtime\n" in source
        assert "public sealed class" in source
        assert source.count("{") == source.count("}")


class TestPreconditions:
    def test_unloaded_model_is_rejected(self, sample_policies):
        with pytest.raises(ValueError):
            render(StaticPolicyModel(sample_policies, loaded=False))

    def test_unusable_assembly_name_is_rejected(self, sample_model):
        with pytest.raises(ValueError):
            render(sample_model, assembly_name="...")

    def test_sink_is_required(self, sample_model):
        with pytest.raises(ValueError):
            SourceRenderer().render(sample_model, "A", None)

    def test_cancelled_token_stops_before_policies(self, sample_model):
        token = CancellationToken()
        token.cancel()
        sink = io.StringIO()
        with pytest.raises(OperationCancelledError):
            render_source(sample_model, "Contoso.Policies", sink, token)
        assert "class HomePage" not in sink.getvalue()
