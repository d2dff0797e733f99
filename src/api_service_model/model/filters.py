"""Wildcard filters driven by the model override's ignore sets.

Patterns are dot-separated, one segment per key, where each segment is
either the exact key or "*". Only the combinations listed in each table
are checked.
"""

import logging

from api_service_model.entities.override import ModelOverride

logger = logging.getLogger(__name__)

WILDCARD = "*"

# True keeps the key, False replaces it with the wildcard.
OPERATION_COMBINATIONS = (
    (True, True),  # op.verb
    (False, True),  # *.verb
    (True, False),  # op.*
    (False, False),  # *.*
)

REQUEST_HEADER_COMBINATIONS = (
    (False, False),  # *.*
    (False, True),  # *.header
    (True, True),  # op.header
    (True, False),  # op.*
)

# "*.code.header" is not one of these.
RESPONSE_HEADER_COMBINATIONS = (
    (False, False, False),  # *.*.*
    (False, False, True),  # *.*.header
    (False, True, False),  # *.code.*
    (True, True, True),  # op.code.header
    (True, False, True),  # op.*.header
    (True, True, False),  # op.code.*
)


def matches_any(patterns: set[str] | None, keys: tuple, combinations: tuple) -> bool:
    """Whether any combination of exact/wildcard keys appears in `patterns`.

    A key of None (e.g. an operation without an identifier) can only be
    matched through the wildcard.
    """
    if not patterns:
        return False

    for combination in combinations:
        segments = []
        for key, exact in zip(keys, combination):
            if not exact:
                segments.append(WILDCARD)
            elif key is None:
                break
            else:
                segments.append(str(key))
        else:
            if ".".join(segments) in patterns:
                return True
    return False


class OverrideFilter:
    """Decides which operations and headers the model builder skips."""

    def __init__(self, override: ModelOverride | None = None):
        self.override = override or ModelOverride()

    def ignore_operation(self, operation_id: str | None, verb: str) -> bool:
        ignored = matches_any(self.override.ignore_operations, (operation_id, verb), OPERATION_COMBINATIONS)
        if ignored:
            logger.debug("Ignoring operation %s.%s", operation_id, verb)
        return ignored

    def ignore_request_header(self, operation_name: str, header_name: str) -> bool:
        ignored = matches_any(
            self.override.ignore_request_headers, (operation_name, header_name), REQUEST_HEADER_COMBINATIONS
        )
        if ignored:
            logger.debug("Ignoring request header %s for %s", header_name, operation_name)
        return ignored

    def ignore_response_header(self, operation_name: str | None, code: int, header_name: str) -> bool:
        ignored = matches_any(
            self.override.ignore_response_headers,
            (operation_name, code, header_name),
            RESPONSE_HEADER_COMBINATIONS,
        )
        if ignored:
            logger.debug("Ignoring response header %s for %s (%s)", header_name, operation_name, code)
        return ignored

    def filter_response_headers(self, operation_name: str | None, code: int, headers: dict) -> dict:
        """The headers that survive, in ascending header-name order."""
        return {
            name: headers[name]
            for name in sorted(headers)
            if not self.ignore_response_header(operation_name, code, name)
        }
