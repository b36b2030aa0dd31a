"""Resolver contract generator.

Runs one generation: pre-hooks on the IR, projection, rendering in the
selected dialect, then post-hooks (formatting included) on the text.

Supports custom templates via the template_dir parameter:
    generator = CodeGenerator(ir, "typescript", template_dir="./my_templates")
"""

import logging
import os
from typing import Optional

from .hooks import HookRunner
from .ir import IRSchema
from .model_map import ContextDescriptor, ModelMap
from .projector import DeclarationProjector, Projection
from .renderers import DialectRenderer, get_renderer
from .scalars import ScalarRegistry

logger = logging.getLogger(__name__)

SCAFFOLD_INDEX = "index"


class CodeGenerator:
    """Generates resolver declarations from GraphQL IR.

    Example:
        generator = CodeGenerator(
            ir=schema,
            language="flow",
            model_map={"User": ModelDescriptor("User", "./models")},
        )
        code = generator.generate()
    """

    def __init__(
        self,
        ir: IRSchema,
        language: str = "typescript",
        model_map: Optional[ModelMap] = None,
        context: Optional[ContextDescriptor] = None,
        default_resolvers: bool = True,
        scalars: Optional[ScalarRegistry] = None,
        template_dir: Optional[str] = None,
        hooks: Optional[HookRunner] = None,
    ):
        """Initialize the code generator.

        Args:
            ir: The intermediate representation of the GraphQL schema
            language: Target dialect, "typescript" or "flow"
            model_map: Bindings from schema type names to models
            context: The resolver context type, or None for an `any` context
            default_resolvers: Emit pass-through default resolver bundles
            scalars: Spellings for custom scalars
            template_dir: Optional directory with custom Jinja2 templates.
                          Templates here override the built-in templates.
            hooks: Pre- and post-generation hooks to run
        """
        self.ir = ir
        self.model_map = model_map or {}
        self.context = context
        self.default_resolvers = default_resolvers
        self.hooks = hooks or HookRunner()
        self.renderer: DialectRenderer = get_renderer(language, scalars, template_dir)
        self._projection: Projection | None = None

    @property
    def output_filename(self) -> str:
        return f"resolvers{self.renderer.file_extension}"

    def project(self) -> Projection:
        """Run pre-hooks and project the schema, once per generator."""
        if self._projection is None:
            ir = self.hooks.run_pre_hooks(self.ir)
            projector = DeclarationProjector(
                ir,
                self.model_map,
                context=self.context,
                default_resolvers=self.default_resolvers,
            )
            self._projection = projector.project()
            if self._projection.unbound:
                logger.info(
                    "Using fallback models for %d types: %s",
                    len(self._projection.unbound),
                    ", ".join(self._projection.unbound),
                )
        return self._projection

    def generate(self, filename: Optional[str] = None) -> str:
        """Generate the declaration file content."""
        content = self.renderer.render(self.project())
        return self.hooks.run_post_hooks(filename or self.output_filename, content)

    def generate_scaffolds(self, generated_import: str) -> dict[str, str]:
        """Generate one implementation stub per object type, plus an index module.

        Args:
            generated_import: Module specifier of the generated declarations,
                              as seen from the scaffolding directory

        Returns:
            Mapping of file name to content
        """
        projection = self.project()
        ext = self.renderer.file_extension
        files = {}
        for obj in projection.objects:
            filename = f"{obj.name}{ext}"
            content = self.renderer.render_scaffold(projection, obj.name, generated_import)
            files[filename] = self.hooks.run_post_hooks(filename, content)
        index_name = f"{SCAFFOLD_INDEX}{ext}"
        index = self.renderer.render_scaffold_index(projection, generated_import)
        files[index_name] = self.hooks.run_post_hooks(index_name, index)
        return files

    def write(self, output_path: str) -> str:
        """Generate and write the declaration file. Returns the content."""
        content = self.generate(os.path.basename(output_path))
        os.makedirs(os.path.dirname(os.path.abspath(output_path)), exist_ok=True)
        with open(output_path, "w") as f:
            f.write(content)
        return content

    def write_scaffolds(
        self, output_dir: str, generated_path: str, force: bool = False
    ) -> list[str]:
        """Write scaffold files, keeping existing ones unless forced.

        Args:
            output_dir: Directory receiving the scaffold files
            generated_path: Path of the generated declarations file
            force: Overwrite files that already exist

        Returns:
            Paths of the files written
        """
        os.makedirs(output_dir, exist_ok=True)
        generated_import = scaffold_import_path(output_dir, generated_path)
        written = []
        for filename, content in self.generate_scaffolds(generated_import).items():
            path = os.path.join(output_dir, filename)
            if os.path.exists(path) and not force:
                logger.info("Skipping %s, file already exists", path)
                continue
            with open(path, "w") as f:
                f.write(content)
            written.append(path)
        return written


def scaffold_import_path(scaffold_dir: str, generated_path: str) -> str:
    """Module specifier of the generated file relative to the scaffolding directory."""
    target = os.path.splitext(os.path.abspath(generated_path))[0]
    relative = os.path.relpath(target, os.path.abspath(scaffold_dir)).replace(os.sep, "/")
    return relative if relative.startswith(".") else f"./{relative}"
