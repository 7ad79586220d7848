"""Single-pass backtick token substitution for container templates.

Text between two backticks is a token name. Known names are replaced by the
value of their substitution callable, unknown names are dropped, and every
byte outside a token is copied verbatim. There is no nesting and no way to
escape the delimiter.
"""

from __future__ import annotations

from pathlib import Path
from typing import BinaryIO, Callable, Mapping, Union

from .errors import OutputOpenError, TemplateMissingError

DELIMITER = b"`"
UNTERMINATED_MODES = ("discard", "literal")

Substitution = Callable[[], Union[str, bytes]]


def _expand(name: bytes, substitutions: Mapping[str, Substitution]) -> bytes:
    factory = substitutions.get(name.decode("utf-8", "replace"))
    if factory is None:
        return b""
    value = factory()
    if isinstance(value, str):
        value = value.encode("utf-8")
    return value


def render_template(
    source: BinaryIO,
    sink: BinaryIO,
    substitutions: Mapping[str, Substitution],
    unterminated: str = "discard",
    chunk_size: int = 64 * 1024,
) -> None:
    """Stream ``source`` into ``sink`` replacing backtick tokens.

    ``unterminated`` decides what happens to a token still open at end of
    input: ``"discard"`` drops it, ``"literal"`` writes the opening backtick
    and the buffered text unchanged.
    """

    if unterminated not in UNTERMINATED_MODES:
        raise ValueError(f"Unknown unterminated token mode: {unterminated}")

    in_token = False
    token = bytearray()

    while True:
        chunk = source.read(chunk_size)
        if not chunk:
            break
        pos = 0
        while pos < len(chunk):
            tick = chunk.find(DELIMITER, pos)
            end = len(chunk) if tick < 0 else tick
            if in_token:
                token += chunk[pos:end]
            else:
                sink.write(chunk[pos:end])
            if tick < 0:
                break
            if in_token:
                sink.write(_expand(bytes(token), substitutions))
                in_token = False
            else:
                in_token = True
                token.clear()
            pos = tick + 1

    if in_token and unterminated == "literal":
        sink.write(DELIMITER + bytes(token))


def render_template_file(
    template_path: str | Path,
    output_path: str | Path,
    substitutions: Mapping[str, Substitution],
    unterminated: str = "discard",
) -> Path:
    """Render ``template_path`` into ``output_path``.

    The template is opened before the output so a missing template never
    leaves an output file behind.
    """

    template_path = Path(template_path)
    output_path = Path(output_path)
    try:
        source = template_path.open("rb")
    except OSError as exc:
        raise TemplateMissingError(f"Failed to open template file {template_path}") from exc

    with source:
        try:
            sink = output_path.open("wb")
        except OSError as exc:
            raise OutputOpenError(f"File {output_path} failed to open") from exc
        with sink:
            render_template(source, sink, substitutions, unterminated=unterminated)

    return output_path
