import os
import shutil
import tempfile
from dataclasses import dataclass
from typing import Optional

from capngen import logging as capngen_logging
from capngen import utils
from capngen.extractor import Extractor
from capngen.frontend import SourceUnit, feed
from capngen.frontend.descriptor_loader import (load_descriptor_file,
                                                load_descriptor_string)
from capngen.frontend.go_parser import GoParser
from capngen.options import GeneratorOptions
from capngen.thirdparty import CapnpCompiler

logger = capngen_logging.get_logger(__name__)

GO_CAPNP = "go.capnp"


@dataclass(frozen=True)
class GeneratedCode:
    schema: str
    translator: str


class Capngen:
    """One generation run: inputs in, schema and translator out.

    Inputs are parsed as they are added; nothing reaches the extractor
    until ``generate`` so that declarations from every input are known
    before any struct is mapped.
    """

    def __init__(
        self,
        config_file: Optional[str] = None,
        config: Optional[dict] = None,
        **overrides,
    ):
        self.config = config if config is not None else utils.try_load_config(config_file)
        self.options = GeneratorOptions.from_config(self.config).with_overrides(**overrides)
        self.units: list[SourceUnit] = []
        self._generated: Optional[GeneratedCode] = None

    def add_go_file(self, path: str) -> SourceUnit:
        unit = GoParser(self.options.extract_private).parse_file(path)
        return self._add(unit)

    def add_go_source(self, src: str, origin: str = "<string>") -> SourceUnit:
        unit = GoParser(self.options.extract_private).parse_string(src, origin)
        return self._add(unit)

    def add_descriptor_file(self, path: str) -> SourceUnit:
        return self._add(load_descriptor_file(path))

    def add_descriptor_source(self, text: str, origin: str = "<descriptor>") -> SourceUnit:
        return self._add(load_descriptor_string(text, origin))

    def add_input(self, path: str) -> SourceUnit:
        if path.endswith(".json"):
            return self.add_descriptor_file(path)
        return self.add_go_file(path)

    def _add(self, unit: SourceUnit) -> SourceUnit:
        if unit.package:
            if not self.options.package:
                self.options = self.options.with_overrides(package=unit.package)
            elif unit.package != self.options.package:
                capngen_logging.at_source(logger, unit.origin).warning(
                    "declares package %s but output uses package %s", unit.package, self.options.package)
        self.units.append(unit)
        self._generated = None
        logger.debug("added %s with %d declaration(s)", unit.origin, len(unit.declarations))
        return unit

    def generate(self) -> GeneratedCode:
        if self._generated is not None:
            return self._generated
        extractor = Extractor(self.options)
        feed(extractor, [decl for unit in self.units for decl in unit.declarations])
        schema = extractor.render_schema()
        translator = extractor.render_translator()
        logger.info("generated %d struct(s), %d list helper pair(s)",
                    len(extractor.structs), len(extractor.helpers.cache))
        self._generated = GeneratedCode(schema, translator)
        return self._generated

    def write(self, out_dir: str) -> tuple[str, str]:
        """Write both artifacts into ``out_dir``; returns their paths."""
        generated = self.generate()
        output_cfg = self.config.get("output", {})
        schema_path = os.path.join(out_dir, output_cfg.get("schema_file", "schema.capnp"))
        translator_path = os.path.join(out_dir, output_cfg.get("translator_file", "translateCapn.go"))
        utils.save_code(schema_path, generated.schema)
        utils.save_code(translator_path, generated.translator)
        logger.info("wrote %s", schema_path)
        logger.info("wrote %s", translator_path)
        return schema_path, translator_path

    def validate(self, schema_path: Optional[str] = None) -> None:
        """Compile the schema with capnp; an unwritten schema goes through a temporary file."""
        capnp_cfg = self.config.get("capnp", {})
        if schema_path is None:
            with tempfile.TemporaryDirectory(prefix="capngen-") as tmp:
                path = os.path.join(tmp, self.config.get("output", {}).get("schema_file", "schema.capnp"))
                utils.save_code(path, self.generate().schema)
                # the schema imports go.capnp relative to itself
                for include in capnp_cfg.get("import_paths", []):
                    go_capnp = os.path.join(include, GO_CAPNP)
                    if os.path.isfile(go_capnp):
                        shutil.copy(go_capnp, tmp)
                        break
                self.validate(path)
            return
        CapnpCompiler(
            schema_path,
            executable=capnp_cfg.get("executable", "capnp"),
            timeout=capnp_cfg.get("timeout"),
            import_paths=capnp_cfg.get("import_paths", []),
        ).compile()

    @classmethod
    def extract_string(cls, src: str, header: bool = False, **overrides) -> str:
        """Schema text for the structs in Go source ``src``."""
        runner = cls(config=utils.load_default_config(), **overrides)
        runner.add_go_source(src)
        extractor = Extractor(runner.options)
        feed(extractor, [decl for unit in runner.units for decl in unit.declarations])
        return extractor.render_schema(header=header)
