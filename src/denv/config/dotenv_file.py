"""Read dotenv files into plain dictionaries.

Parsing is delegated to python-dotenv's statement parser. Values are taken
literally: no ``${VAR}`` expansion is performed.
"""

import io
from pathlib import Path
from typing import Dict

from dotenv.parser import parse_stream

from denv.exceptions import SourceReadError


def parse_env_text(text: str, source: str = "<string>") -> Dict[str, str]:
    """Parse dotenv-formatted text.

    Args:
        text: File contents
        source: Name used in error messages

    Returns:
        Key/value pairs in file order; a later duplicate key wins.

    Raises:
        SourceReadError: If a statement cannot be parsed
    """
    values: Dict[str, str] = {}
    for binding in parse_stream(io.StringIO(text)):
        if binding.error:
            line = binding.original.line
            statement = binding.original.string.strip()
            raise SourceReadError(
                source,
                f"unexpected statement on line {line}: {statement!r}",
                code="SOURCE_PARSE_FAILED",
                details={"line": line},
            )
        # Comments and blank lines have no key, a bare `KEY` has no value
        if binding.key is None or binding.value is None:
            continue
        values[binding.key] = binding.value
    return values


def read_env_file(path: Path) -> Dict[str, str]:
    """Read and parse one dotenv file.

    Raises:
        FileNotFoundError: If the file does not exist (callers decide whether
            that is fatal)
        SourceReadError: If the file cannot be read, decoded or parsed
    """
    try:
        text = Path(path).read_text(encoding="utf-8-sig")
    except FileNotFoundError:
        raise
    except UnicodeDecodeError as e:
        raise SourceReadError(str(path), f"invalid UTF-8: {e}") from e
    except OSError as e:
        raise SourceReadError(str(path), e.strerror or str(e)) from e
    return parse_env_text(text, source=str(path))
