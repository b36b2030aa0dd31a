"""Hooks around resolver declaration generation.

Pre-generation hooks rewrite the IR before it is projected; post-generation
hooks rewrite each generated file (declarations, scaffolds) before it is
written. Formatting with prettier is itself a post-generation hook.

Example usage:
    from gql_resolvergen.core.hooks import HookRunner, PrettierHook

    # Drop federation plumbing types before projection
    class DropFederationTypes:
        def pre_generate(self, ir):
            ir.types.pop("_Service", None)
            return ir

    runner = HookRunner(pre_hooks=[DropFederationTypes()])
    runner.add_post_hook(PrettierHook("typescript"))
"""

import copy
import logging
import subprocess
from typing import Iterable, Protocol, Sequence, runtime_checkable

from .errors import FormattingError
from .ir import IRSchema

logger = logging.getLogger(__name__)


@runtime_checkable
class PreGenerateHook(Protocol):
    """Receives the IR before projection and returns the IR to project."""

    def pre_generate(self, ir: IRSchema) -> IRSchema:
        ...


@runtime_checkable
class PostGenerateHook(Protocol):
    """Receives one generated file and returns the text to write.

    ``filename`` is the base name of the file, e.g. ``resolvers.ts`` or
    ``User.ts`` for a scaffold.
    """

    def post_generate(self, filename: str, content: str) -> str:
        ...


class AddHeaderHook:
    """Prepends a fixed header, followed by one blank line.

    Example:
        hook = AddHeaderHook("/* eslint-disable */")
    """

    def __init__(self, header: str):
        self.header = header.rstrip("\n")

    def post_generate(self, _filename: str, content: str) -> str:
        return f"{self.header}\n\n{content}"


class FilterTypesHook:
    """Removes named types from the IR by name prefix or suffix.

    Object, input, enum, interface and union types are all filtered.
    Interface implementer lists and union member lists are pruned to the
    object types that survive, and object interface lists to the surviving
    interfaces. The hook filters a copy; the IR passed in is left untouched. A type that is still referenced by a
    remaining field is a schema error at projection time.

    Example:
        # Hide internal types such as `_Debug`
        hook = FilterTypesHook(exclude_prefix="_")
    """

    def __init__(
        self,
        exclude_prefix: str | None = None,
        exclude_suffix: str | None = None,
        include_prefix: str | None = None,
        include_suffix: str | None = None,
    ):
        self.exclude_prefix = exclude_prefix
        self.exclude_suffix = exclude_suffix
        self.include_prefix = include_prefix
        self.include_suffix = include_suffix

    def keeps(self, name: str) -> bool:
        """Return True if the type named ``name`` survives the filter."""
        if self.exclude_prefix and name.startswith(self.exclude_prefix):
            return False
        if self.exclude_suffix and name.endswith(self.exclude_suffix):
            return False
        if self.include_prefix and not name.startswith(self.include_prefix):
            return False
        if self.include_suffix and not name.endswith(self.include_suffix):
            return False
        return True

    def pre_generate(self, ir: IRSchema) -> IRSchema:
        ir = copy.deepcopy(ir)
        for registry in ("types", "inputs", "enums", "interfaces", "unions"):
            kept = {name: t for name, t in getattr(ir, registry).items() if self.keeps(name)}
            setattr(ir, registry, kept)

        for interface in ir.interfaces.values():
            interface.implementations = [n for n in interface.implementations if n in ir.types]
        for union in ir.unions.values():
            union.members = [n for n in union.members if n in ir.types]
        for ir_type in ir.types.values():
            ir_type.interfaces = [n for n in ir_type.interfaces if n in ir.interfaces]
        return ir


def run_prettier(content: str, parser: str, command: Sequence[str] = ("prettier",)) -> str:
    """Format source text with prettier, reading from stdin.

    Raises:
        FormattingError: If prettier is missing or rejects the input
    """
    try:
        result = subprocess.run(
            [*command, "--parser", parser],
            input=content,
            capture_output=True,
            text=True,
            check=True,
        )
    except OSError as e:
        raise FormattingError(f"Could not run formatter {command[0]}: {e}") from e
    except subprocess.CalledProcessError as e:
        raise FormattingError(
            f"Formatter exited with status {e.returncode}", output=e.stderr or ""
        ) from e
    return result.stdout


class PrettierHook:
    """Formats generated code with prettier.

    A formatting failure never loses content: the unformatted code is
    returned and the diagnostic is logged and kept in ``errors``.

    Example:
        hook = PrettierHook("flow", command=["npx", "prettier"])
    """

    def __init__(self, parser: str, command: Sequence[str] = ("prettier",)):
        self.parser = parser
        self.command = tuple(command)
        self.errors: list[str] = []

    def post_generate(self, filename: str, content: str) -> str:
        try:
            return run_prettier(content, self.parser, self.command)
        except FormattingError as e:
            diagnostic = f"{filename}: {e.message}"
            if e.output:
                diagnostic += f"\n{e.output.strip()}"
            self.errors.append(diagnostic)
            logger.warning(
                "There is a syntax error in generated code or the formatter failed, "
                "writing unformatted code (%s)",
                diagnostic,
            )
            return content


class HookRunner:
    """Applies pre- and post-generation hooks in registration order."""

    def __init__(
        self,
        pre_hooks: Iterable[PreGenerateHook] = (),
        post_hooks: Iterable[PostGenerateHook] = (),
    ):
        self.pre_hooks: list[PreGenerateHook] = list(pre_hooks)
        self.post_hooks: list[PostGenerateHook] = list(post_hooks)

    def add_pre_hook(self, hook: PreGenerateHook):
        self.pre_hooks.append(hook)

    def add_post_hook(self, hook: PostGenerateHook):
        self.post_hooks.append(hook)

    def run_pre_hooks(self, ir: IRSchema) -> IRSchema:
        for hook in self.pre_hooks:
            logger.debug("Running pre-generation hook %s", type(hook).__name__)
            ir = hook.pre_generate(ir)
        return ir

    def run_post_hooks(self, filename: str, content: str) -> str:
        for hook in self.post_hooks:
            content = hook.post_generate(filename, content)
        return content
