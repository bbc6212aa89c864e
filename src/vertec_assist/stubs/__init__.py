from vertec_assist.stubs.generator import class_stub, generate_stubs, is_stub_name

__all__ = [
    "class_stub",
    "generate_stubs",
    "is_stub_name",
]
