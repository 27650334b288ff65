"""
Template rendering engine.

Turns the policies of a loaded policy model into one C# compilation unit:
banner, pragma, an outer namespace named after the assembly, one rendered
policy template per policy, and the shared runtime supplement.
"""
import logging
from typing import Any, Iterable, List, Optional, TextIO

from jinja2 import Environment, StrictUndefined

from ..policy.models import Policy
from ..utils.cancellation import CancellationToken, ensure_token
from . import templates
from .formatting import HELPERS, escape_namespace

logger = logging.getLogger(__name__)


def _unhandled_element(item: Any) -> str:
    raise TypeError(f"Unsupported element item: {type(item).__name__}")


def _as_policies(query_result: Any) -> List[Policy]:
    if isinstance(query_result, Policy):
        return [query_result]
    if isinstance(query_result, Iterable):
        return list(query_result)
    raise TypeError(f"Policy model query returned {type(query_result).__name__}")


class SourceRenderer:
    """
    Renders policy models to C# source text.

    The Jinja2 environment and the compiled templates are built once per
    renderer; the formatting helpers are installed as template globals.
    """

    def __init__(self) -> None:
        self.env = Environment(
            undefined=StrictUndefined,
            trim_blocks=True,
            lstrip_blocks=True,
            autoescape=False,
            keep_trailing_newline=True,
        )
        self.env.globals.update(HELPERS)
        self.env.globals["unhandled_element"] = _unhandled_element
        self.policy_template = self.env.from_string(templates.POLICY_TEMPLATE)
        self.supplement_template = self.env.from_string(templates.SUPPLEMENT_TEMPLATE)

    def render_policy(self, policy: Policy, root_namespace: str) -> str:
        if not escape_namespace(policy.namespace):
            # Policies without a category land directly in the root namespace.
            policy = policy.model_copy(update={"namespace": "Policies"})
        return self.policy_template.render(
            policy=policy,
            using_references=templates.USING_REFERENCES,
            runtime_namespace=f"{root_namespace}.{templates.RUNTIME_NAMESPACE}",
            reserved_members=list(templates.RESERVED_MEMBERS),
            runtime_types=list(templates.RUNTIME_TYPES),
            class_name_suffix=templates.CLASS_NAME_SUFFIX,
        )

    def render_supplement(self) -> str:
        return self.supplement_template.render(
            runtime_name=templates.RUNTIME_NAMESPACE,
            using_references=templates.USING_REFERENCES,
            body="\n".join(section.strip("\n") + "\n" for section in templates.SUPPLEMENT_SECTIONS),
        )

    def render(
        self,
        model: Any,
        assembly_name: str,
        sink: TextIO,
        token: Optional[CancellationToken] = None,
    ) -> int:
        """
        Render every policy of ``model`` into ``sink``.

        Args:
            model: A loaded policy model (see admxgen.policy.PolicyModel).
            assembly_name: Name of the target assembly; also the root namespace.
            sink: Text stream the source is written to.
            token: Checked before each policy is rendered.

        Returns:
            The number of policies rendered.

        Raises:
            ValueError: If the model is not loaded or the assembly name has no
                valid namespace form.
            OperationCancelledError: If the token is cancelled mid-render.
        """
        token = ensure_token(token)
        if model is None or not model.loaded:
            raise ValueError("The policy model must be loaded before rendering.")
        if sink is None:
            raise ValueError("A sink is required.")

        root_namespace = escape_namespace(assembly_name)
        if not root_namespace:
            raise ValueError(f"'{assembly_name}' is not a usable assembly name.")

        policies = _as_policies(model.query())

        sink.write(templates.BANNER + "\n\n")
        sink.write(templates.PRAGMA + "\n\n")
        sink.write(f"namespace {root_namespace}\n{{\n")

        for policy in policies:
            token.raise_if_cancelled()
            sink.write(self.render_policy(policy, root_namespace))
            sink.write("\n")

        sink.write(self.render_supplement())
        sink.write("}\n")

        logger.debug("Rendered %d policies into namespace %s", len(policies), root_namespace)
        return len(policies)


_renderer: Optional[SourceRenderer] = None


def get_renderer() -> SourceRenderer:
    global _renderer
    if _renderer is None:
        _renderer = SourceRenderer()
    return _renderer


def render_source(
    model: Any,
    assembly_name: str,
    sink: TextIO,
    token: Optional[CancellationToken] = None,
) -> int:
    """Render ``model`` with the shared renderer. See SourceRenderer.render."""
    return get_renderer().render(model, assembly_name, sink, token)
