"""XML to Avro converter.

Turns loosely typed XML documents into value graphs that conform to an Avro
schema: child elements and attributes are merged into one multi-valued field
namespace, then encoded against the schema with union resolution, default
injection and scalar coercion.

Progressive API Disclosure:
- Level 1: Simple functions - convert(), convert_string(), convert_file()
- Level 2: Reusable converter - XMLAvroConverter class
- Level 3: Components - TreeBuilder and SchemaEncoder
"""

__version__ = "0.1.0"
__author__ = "XML Avro Converter Team"

# Progressive API disclosure - Level 1 and 2
from .api import (
    ConversionResult,
    XMLAvroConverter,
    build_tree,
    convert,
    convert_file,
    convert_string,
)

# Level 3: Components
from .encoding import ArrayValue, RecordValue, SchemaEncoder
from .schema import load_schema, parse_schema

# Configuration and error classes for advanced usage
from .shared import (
    ConversionError,
    ConverterConfig,
    MalformedScalarError,
    StructuralAmbiguityError,
)
from .tree import DocumentTree, TreeBuilder

__all__ = [
    # Version and metadata
    "__author__",
    "__version__",

    # Level 1: Simple conversion functions
    "convert",
    "convert_string",
    "convert_file",
    "build_tree",

    # Level 2: Reusable converter
    "XMLAvroConverter",
    "ConversionResult",

    # Level 3: Components and data structures
    "DocumentTree",
    "TreeBuilder",
    "SchemaEncoder",
    "RecordValue",
    "ArrayValue",
    "parse_schema",
    "load_schema",

    # Configuration and errors
    "ConverterConfig",
    "ConversionError",
    "StructuralAmbiguityError",
    "MalformedScalarError",
]
