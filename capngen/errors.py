class CapngenError(Exception):
    """Base class for every fatal condition raised while generating code."""


class TypeSequenceError(CapngenError):
    pass


class AnnotationError(CapngenError):
    pass


class FieldOrderError(CapngenError):
    def __init__(self, message: str, struct_name: str, field_names: list[str], index: int):
        super().__init__(message)
        self.struct_name = struct_name
        self.field_names = field_names
        self.index = index


class ReservedWordError(CapngenError):
    def __init__(self, message: str, identifier: str):
        super().__init__(message)
        self.identifier = identifier


class UnsupportedTypeError(CapngenError):
    pass


class StructStateError(CapngenError):
    pass


class DescriptorError(CapngenError):
    pass


class CapnpCompileError(CapngenError):
    def __init__(self, message: str, diagnostics: str = ""):
        super().__init__(message)
        self.diagnostics = diagnostics
