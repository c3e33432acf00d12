"""
Reference rewriting from the model pointer grammar to OpenAPI components/paths.

Two dialects are supported:

* ``simple`` - single-file models; in-document references have their
  ``#model/definitions`` prefix mapped to ``#/components`` and everything else
  passes through untouched.
* ``extended`` - multi-file models; in-document references are rewritten as above
  and normalized, cross-file references are mapped into the target file's
  ``components`` or ``paths`` tree, with responses moved under ``responses``.
"""

# pylint: disable=line-too-long

import logging
from typing import Callable, Dict, Optional
from urllib.parse import quote, unquote

import jsonpointer

logger = logging.getLogger(__name__)

SIMPLE_DIALECT = 'simple'
EXTENDED_DIALECT = 'extended'
REFERENCE_DIALECTS = (SIMPLE_DIALECT, EXTENDED_DIALECT)

MODEL_DEFINITIONS_PREFIX = '#model/definitions'
COMPONENTS_PREFIX = '#/components'

# characters left as-is when percent-encoding a file path or a pointer segment
_PATH_SAFE = "/:.-_~!$&'()*+,;=@"
_SEGMENT_SAFE = "-_.~!$&'()*+,;=:@"


def prepare_reference_name(ref: str) -> str:
    """
    Normalizes a reference so it is a valid URI reference with a JSON Pointer fragment.

    The file part is percent-encoded. Every fragment segment is JSON Pointer escaped
    and percent-encoded. Input that is already normalized comes back unchanged.

    Args:
        ref: The reference, e.g. ``#/components/schemas/My Type``.

    Returns:
        The normalized reference, e.g. ``#/components/schemas/My%20Type``.
    """
    if not ref:
        return ref
    path, sep, fragment = ref.partition('#')
    path = quote(unquote(path), safe=_PATH_SAFE)
    if not sep:
        return path
    if not fragment.startswith('/'):
        return f"{path}#{quote(unquote(fragment), safe=_PATH_SAFE)}"
    segments = fragment[1:].split('/')
    encoded = [quote(jsonpointer.escape(jsonpointer.unescape(unquote(segment))), safe=_SEGMENT_SAFE) for segment in segments]
    return f"{path}#/{'/'.join(encoded)}"


class ReferenceRewriter:
    """
    Rewrites model references into the OpenAPI pointer grammar.

    Attributes:
        dialect: 'simple' or 'extended'.
        reference_name_normalizer: Applied to in-document and fragment-less references
            in the extended dialect.
    """

    def __init__(self, dialect: str = EXTENDED_DIALECT, reference_name_normalizer: Optional[Callable[[str], str]] = None) -> None:
        if dialect not in REFERENCE_DIALECTS:
            raise ValueError(f"Unknown reference dialect: {dialect}. Expected one of {', '.join(REFERENCE_DIALECTS)}")
        self.dialect = dialect
        self.reference_name_normalizer = reference_name_normalizer or prepare_reference_name

    def rewrite(self, ref: str) -> Dict[str, str]:
        """
        Rewrites a reference.

        Args:
            ref: The model reference.

        Returns:
            A ``{'$ref': ...}`` mapping with the rewritten reference.
        """
        ref = str(ref)
        if self.dialect == SIMPLE_DIALECT:
            rewritten = self.rewrite_simple(ref)
        else:
            rewritten = self.rewrite_extended(ref)
        logger.debug("Rewrote reference %s -> %s", ref, rewritten)
        return {'$ref': rewritten}

    def rewrite_simple(self, ref: str) -> str:
        """ In-document references get the components prefix, everything else is kept. """
        if ref.startswith('#'):
            return ref.replace(MODEL_DEFINITIONS_PREFIX, COMPONENTS_PREFIX, 1)
        return ref

    def rewrite_extended(self, ref: str) -> str:
        """ Handles in-document as well as cross-file references. """
        if ref.startswith('#'):
            return self.reference_name_normalizer(ref.replace(MODEL_DEFINITIONS_PREFIX, COMPONENTS_PREFIX, 1))

        parts = ref.split('#/')
        path_to_file = parts[0]
        relative_path = parts[1] if len(parts) > 1 else ''
        if not relative_path:
            return self.reference_name_normalizer(ref)

        path = relative_path.replace('/properties', '').split('/')
        if path[0] == 'definitions':
            return f"{path_to_file}#/components/{'/'.join(path[1:])}"

        if len(path) < 4 or path[3] != 'response':
            return f"{path_to_file}#/paths/{'/'.join(path)}"

        # <bucket>/<request>/<response>/response/<item...> becomes
        # <bucket>/<request>/responses/<response>/<item...>
        path_with_responses = path[:2] + ['responses', path[2]] + path[4:]
        return f"{path_to_file}#/paths/{'/'.join(path_with_responses)}"


def rewrite_reference(ref: str, dialect: str = EXTENDED_DIALECT) -> Dict[str, str]:
    """
    Rewrites a single model reference.

    Args:
        ref: The model reference.
        dialect: 'simple' or 'extended'.

    Returns:
        A ``{'$ref': ...}`` mapping.
    """
    return ReferenceRewriter(dialect).rewrite(ref)


def print_rewritten_reference(ref: str, dialect: Optional[str] = None) -> None:
    """
    Prints the rewritten form of a model reference.

    Args:
        ref: The model reference.
        dialect: 'simple' or 'extended'; defaults to 'extended'.
    """
    print(rewrite_reference(ref, dialect or EXTENDED_DIALECT)['$ref'])
