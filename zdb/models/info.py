"""
Parsing of the newline-delimited ``key:value`` text returned by INFO and NSINFO.
"""

from typing import Any

from zdb.models.exceptions import ProtocolFormatError


def parse_info(reply: Any) -> dict[str, str]:
    """
    Parse an INFO style reply into a mapping.

    Each line is split on its first ``:``. Lines without a separator (section
    headers, blank lines) are skipped. Values are stripped of surrounding
    spaces and CR/LF, keys are kept as they are.

    Args:
        reply: Raw reply, bytes or str.

    Returns:
        Mapping of field name to value.

    Raises:
        ProtocolFormatError: If the reply is not text.
    """
    if isinstance(reply, bytes):
        try:
            reply = reply.decode("utf-8")
        except UnicodeDecodeError as e:
            raise ProtocolFormatError(f"invalid response, info is not valid utf-8: {e}") from e

    if not isinstance(reply, str):
        raise ProtocolFormatError(
            f"invalid response, expected info to be text, but a {type(reply).__name__} was returned"
        )

    parsed: dict[str, str] = {}
    for line in reply.split("\n"):
        key, sep, value = line.partition(":")
        if not sep:
            continue

        parsed[key] = value.strip(" \r\n")

    return parsed
