from dataclasses import dataclass, replace
from typing import Any, Optional

from capngen.codegen.schema_writer import DEFAULT_FIELD_PREFIX
from capngen.naming import DEFAULT_STRUCT_SUFFIX

DEFAULT_PACKAGE = "main"


@dataclass(frozen=True)
class GeneratorOptions:
    package: str = DEFAULT_PACKAGE
    import_path: str = ""
    struct_suffix: str = DEFAULT_STRUCT_SUFFIX
    extract_private: bool = False
    schema_id: Optional[int] = None
    field_prefix: str = DEFAULT_FIELD_PREFIX

    @classmethod
    def from_config(cls, config: dict[str, Any]) -> "GeneratorOptions":
        section = config.get("generator", {}) if config else {}
        schema_id = section.get("schema_id")
        if isinstance(schema_id, str):
            schema_id = int(schema_id, 0) if schema_id else None
        return cls(
            package=section.get("package", ""),
            import_path=section.get("import_path", ""),
            struct_suffix=section.get("struct_suffix", DEFAULT_STRUCT_SUFFIX),
            extract_private=bool(section.get("extract_private", False)),
            schema_id=schema_id,
            field_prefix=section.get("field_prefix", DEFAULT_FIELD_PREFIX),
        )

    def with_overrides(self, **overrides: Any) -> "GeneratorOptions":
        """Copy with every non-None keyword applied."""
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})

    @property
    def resolved_package(self) -> str:
        return self.package or DEFAULT_PACKAGE

    @property
    def resolved_import_path(self) -> str:
        return self.import_path or self.resolved_package
