"""
Font tagging core: rule-based linting, exemplar selection and similarity
lookup over a catalog of font families and their tag scores.
"""
from .config import TaggerConfig, get_config
from .errors import LoadError, ParseError, SchemaError, UnknownReferenceError
from .exemplars import ExemplarSelector, Exemplars, select_exemplars
from .lint import lint_store, run_lint
from .registry import Registries, RegistryBuilder
from .similarity import SimilarityIndex
from .store import ImportResult, TaggingStore

__version__ = "0.1.0"

__all__ = [
    "ExemplarSelector",
    "Exemplars",
    "ImportResult",
    "LoadError",
    "ParseError",
    "Registries",
    "RegistryBuilder",
    "SchemaError",
    "SimilarityIndex",
    "TaggerConfig",
    "TaggingStore",
    "UnknownReferenceError",
    "get_config",
    "lint_store",
    "run_lint",
    "select_exemplars",
]
