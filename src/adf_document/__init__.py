"""ADF content tree model for local documents.

This package turns Markdown files into ADF (Atlassian Document Format) trees,
walks them, and classifies the image references they contain.
"""

from .document import AdfDocument
from .errors import DocumentError, InvalidSourceError, ConversionError
from .local_reference import is_local_reference
from .markdown_converter import AdfConverter, markdown_to_adf
from .models import AdfMark, AdfNode, AdfNodeType

__all__ = [
    'AdfDocument',
    'AdfConverter',
    'AdfMark',
    'AdfNode',
    'AdfNodeType',
    'markdown_to_adf',
    'is_local_reference',
    'DocumentError',
    'InvalidSourceError',
    'ConversionError',
]
