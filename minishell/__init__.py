"""Shell building blocks: parsing, here-documents, expansion, builtins and execution."""

__version__ = "0.1.0"