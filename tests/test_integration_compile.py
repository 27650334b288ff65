"""
End-to-end compilation against a real .NET SDK and reference package.

Needs network access and a dotnet install; run with ``pytest --integration``.
"""
import pytest
from conftest import StaticPolicyModel

from admxgen.compiler.artifacts import generate_build_log
from admxgen.compiler.orchestrator import emit_compiled_assembly
from admxgen.policy.models import Policy, TextElementItem
from admxgen.policy.source import PolicyContent


@pytest.mark.integration
class TestCompileSample:
    @pytest.mark.asyncio
    async def test_sample_document_compiles(self, sample_document_path, tmp_path):
        model = PolicyContent(sample_document_path)
        await model.load()

        result = await emit_compiled_assembly(model, "Contoso.Policies", tmp_path / "out")

        assert result.build_succeeded, "\n".join(result.diagnostics)
        assert result.diagnostics == ()
        assert result.build_output_path.stat().st_size > 0
        assert result.debug_symbol_file_path.stat().st_size > 0
        assert result.xml_document_file_path.stat().st_size > 0
        assert "<member name=\"T:Contoso.Policies.Contoso.Browser.HomePage\">" in (
            result.xml_document_file_path.read_text(encoding="utf-8")
        )
        log = await generate_build_log(result)
        assert log.is_file()

    @pytest.mark.asyncio
    async def test_empty_model_compiles(self, tmp_path):
        result = await emit_compiled_assembly(StaticPolicyModel([]), "Empty.Policies", tmp_path)

        assert result.build_succeeded, "\n".join(result.diagnostics)
        assert result.diagnostics == ()
        assert result.build_output_path.stat().st_size > 0

    @pytest.mark.asyncio
    async def test_colliding_and_odd_names_compile(self, tmp_path):
        names = [
            "Name", "Class", "DisplayName", "Helpers", "PolicyElement", "!!!",
            "Runtime", "CultureInfo", "ModeOption", "System",
        ]
        policies = [
            Policy(
                name=name,
                namespace="Odd",
                registry_key="Software\\Policies\\Odd",
                elements=[
                    TextElementItem(id="Name", value_name="Name", required=True),
                    TextElementItem(id="Mode", value_name="Mode"),
                    TextElementItem(id="ToString", value_name="ToString"),
                ],
            )
            for name in names
        ]
        policies.append(Policy(name="Helpers", namespace="Runtime", registry_key="Software\\Policies\\Odd"))

        result = await emit_compiled_assembly(StaticPolicyModel(policies), "Odd.Policies", tmp_path)

        assert result.build_succeeded, "\n".join(result.diagnostics)
        assert result.diagnostics == ()
