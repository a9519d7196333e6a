"""
Capture plan extraction from research output.

Research passes append a JSON screenshot plan to their Markdown:

    ===SCREENSHOT_PLAN_START===
    { "screenshots": [ {...}, ... ] }
    ===SCREENSHOT_PLAN_END===

The blocks are internal. They are pulled out here so the synthesis model
only ever sees the prose, and their records feed the capture dispatcher.
"""

import json
import logging
import re
from typing import Optional

logger = logging.getLogger(__name__)

PLAN_START = "===SCREENSHOT_PLAN_START==="
PLAN_END = "===SCREENSHOT_PLAN_END==="
PLAN_KEY = "screenshots"

PLAN_BLOCK_RE = re.compile(
    re.escape(PLAN_START) + r"\s*(\{.*?\})\s*" + re.escape(PLAN_END),
    re.DOTALL,
)

# Whole-line // comments only; URLs keep their '//'
LINE_COMMENT_RE = re.compile(r"^\s*//.*$", re.MULTILINE)
TRAILING_COMMA_RE = re.compile(r",\s*([}\]])")


def parse_plan_payload(payload: str) -> Optional[list]:
    """
    Parse one block payload into its record list.

    Returns None when the payload is not JSON (even after removing the
    comment lines and trailing commas models like to add) or has no
    list under PLAN_KEY.
    """
    decoded = None
    for candidate in (payload, TRAILING_COMMA_RE.sub(r"\1", LINE_COMMENT_RE.sub("", payload))):
        try:
            decoded = json.loads(candidate)
            break
        except ValueError:
            continue

    if not isinstance(decoded, dict):
        return None
    records = decoded.get(PLAN_KEY)
    if not isinstance(records, list):
        return None
    return records


def extract_capture_plan(text: Optional[str], group_id: Optional[str] = None) -> tuple[str, list[dict]]:
    """
    Split research output into (clean_text, capture records).

    - Every plan block is removed from the text, parsed or not. An
      unterminated block is cut together with everything after it.
    - Blocks that fail to parse contribute no records.
    - Records missing group_id are stamped with the given group_id.
    - Never raises.
    """
    text = "" if text is None else str(text)
    records: list[dict] = []

    for match in PLAN_BLOCK_RE.finditer(text):
        parsed = parse_plan_payload(match.group(1).strip())
        if parsed is None:
            logger.warning("Dropping unparseable screenshot plan block (group %s)", group_id or "-")
            continue

        for record in parsed:
            if not isinstance(record, dict):
                continue
            record = dict(record)
            if group_id and "group_id" not in record:
                record["group_id"] = str(group_id)
            records.append(record)

    clean = PLAN_BLOCK_RE.sub("", text)
    # An opening marker with no matching block is a truncated plan; cut from it onwards
    start = clean.find(PLAN_START)
    if start != -1:
        logger.warning("Dropping unterminated screenshot plan block (group %s)", group_id or "-")
        clean = clean[:start]
    return clean.strip(), records
