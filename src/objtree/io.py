"""
Reading and writing JSON/YAML documents.

Format is chosen explicitly or inferred from the file suffix (.yaml/.yml
is YAML, anything else JSON). "-" reads standard input.
"""

from __future__ import annotations

import json as _json
import logging as _logging
import pathlib as _pathlib
import sys as _sys
import typing as _typing

import yaml as _yaml

import objtree.constants as constants
import objtree.errors as errors
import objtree.tree as tree

_logger = _logging.getLogger(__name__)

DocumentFormat: _typing.TypeAlias = _typing.Literal["json", "yaml"]


def infer_format(source: str | _pathlib.Path) -> DocumentFormat:
    """Infer the document format from a file name."""
    if _pathlib.Path(str(source)).suffix.lower() in constants.YAML_SUFFIXES:
        return "yaml"
    return "json"


def parse_document(text: str, fmt: DocumentFormat, *, source: str = "<string>") -> _typing.Any:
    """
    Parse document text.

    Raises:
        DocumentError: If the text is not valid for the format.
    """
    try:
        if fmt == "yaml":
            return _yaml.safe_load(text)
        return _json.loads(text)
    except (_json.JSONDecodeError, _yaml.YAMLError) as e:
        raise errors.DocumentError(source, f"invalid {fmt.upper()}: {e}") from e


def load_document(
    source: str | _pathlib.Path | _typing.TextIO,
    fmt: DocumentFormat | None = None,
) -> _typing.Any:
    """
    Load a document from a path, "-" (stdin) or an open text stream.

    Args:
        source: Where to read from.
        fmt: Format override. Inferred from the name when None; streams
            default to JSON.

    Raises:
        DocumentError: If the source cannot be read or parsed.
    """
    if hasattr(source, "read"):
        stream = _typing.cast(_typing.TextIO, source)
        name = getattr(stream, "name", "<stream>")
        text = stream.read()
        resolved = fmt or "json"
    elif str(source) == constants.STDIN_MARKER:
        name = "<stdin>"
        text = _sys.stdin.read()
        resolved = fmt or "json"
    else:
        path = _pathlib.Path(source)
        name = str(path)
        try:
            text = path.read_text(encoding="utf-8")
        except OSError as e:
            raise errors.DocumentError(name, f"cannot read file: {e}") from e
        resolved = fmt or infer_format(path)

    _logger.debug("Loading %s document from %s", resolved, name)
    return parse_document(text, resolved, source=name)


def to_plain(value: _typing.Any) -> _typing.Any:
    """
    Convert a tree into plain dicts and lists for serialization.

    Entries holding UNDEFINED are dropped; a top-level UNDEFINED becomes None.
    """
    kind = tree.classify(value)
    if kind is tree.NodeKind.MAPPING:
        return {
            key: to_plain(item)
            for key, item in value.items()
            if item is not tree.UNDEFINED
        }
    if kind is tree.NodeKind.ARRAY:
        return [to_plain(item) for item in value if item is not tree.UNDEFINED]
    if value is tree.UNDEFINED:
        return None
    return value


def dump_document(
    value: _typing.Any,
    fmt: DocumentFormat = "json",
    *,
    indent: int = constants.DEFAULT_INDENT,
    sort_keys: bool = False,
) -> str:
    """
    Serialize a tree to JSON or YAML text.

    Values JSON cannot represent (datetimes, patterns) are written with str().
    NaN and infinite floats have no JSON form and raise; YAML writes them as
    .nan and .inf.

    Raises:
        DocumentError: If the value cannot be serialized.
    """
    plain = to_plain(value)
    try:
        if fmt == "yaml":
            return _yaml.safe_dump(
                plain,
                default_flow_style=False,
                sort_keys=sort_keys,
                indent=indent,
                allow_unicode=True,
            )
        return (
            _json.dumps(
                plain,
                indent=indent,
                sort_keys=sort_keys,
                allow_nan=False,
                default=str,
            )
            + "\n"
        )
    except (TypeError, ValueError, _yaml.YAMLError) as e:
        raise errors.DocumentError("<output>", f"cannot serialize as {fmt.upper()}: {e}") from e


def write_document(
    value: _typing.Any,
    path: str | _pathlib.Path,
    fmt: DocumentFormat | None = None,
    *,
    indent: int = constants.DEFAULT_INDENT,
    sort_keys: bool = False,
) -> None:
    """
    Write a tree to a file, format inferred from the suffix when None.

    Raises:
        DocumentError: If the value cannot be serialized or written.
    """
    target = _pathlib.Path(path)
    text = dump_document(value, fmt or infer_format(target), indent=indent, sort_keys=sort_keys)
    try:
        target.write_text(text, encoding="utf-8")
    except OSError as e:
        raise errors.DocumentError(str(target), f"cannot write file: {e}") from e
    _logger.debug("Wrote document to %s", target)
