"""Merge German and English model records into one deduplicated class list.

German records are primary. English names are merged in as alternates:
classes are matched by ``class_id``, associations by their internal ``name``.
Associations without an English counterpart keep ``None`` alternates.
"""

from __future__ import annotations

import logging
from typing import Any

logger = logging.getLogger(__name__)


def deduplicate_classes(records: list[dict[str, Any]]) -> list[dict[str, Any]]:
    """Drop records without a class id and keep the first record per id."""
    seen: set[int] = set()
    unique: list[dict[str, Any]] = []

    for record in records:
        if not isinstance(record, dict):
            continue

        class_id = record.get("class_id")
        if class_id is None:
            logger.debug(f"Skipping class record without class_id: {record.get('name')}")
            continue

        class_id = int(class_id)
        if class_id in seen:
            logger.debug(f"Skipping duplicate class record {class_id}")
            continue

        seen.add(class_id)
        unique.append(record)

    return unique


def merge_language_variants(
    primary: list[dict[str, Any]],
    alternate: list[dict[str, Any]] | None = None,
) -> list[dict[str, Any]]:
    """Return deduplicated primary records enriched with alternate names."""
    primary = deduplicate_classes(primary)
    if not alternate:
        return [_with_empty_alternates(record) for record in primary]

    alt_by_id = {int(r["class_id"]): r for r in deduplicate_classes(alternate)}

    merged = []
    matched_associations = 0
    for record in primary:
        alt_record = alt_by_id.get(int(record["class_id"]))
        merged_record, matched = _merge_class(record, alt_record)
        matched_associations += matched
        merged.append(merged_record)

    logger.info(
        f"Merged {len(merged)} classes, {matched_associations} associations "
        f"with alternate names"
    )
    return merged


def _with_empty_alternates(record: dict[str, Any]) -> dict[str, Any]:
    merged = dict(record)
    merged["associations"] = [
        {
            **assoc,
            "perceived_name_alt": assoc.get("perceived_name_alt"),
            "role1_name_alt": assoc.get("role1_name_alt"),
            "role2_name_alt": assoc.get("role2_name_alt"),
        }
        for assoc in record.get("associations") or []
        if isinstance(assoc, dict)
    ]
    return merged


def _merge_class(
    record: dict[str, Any],
    alt_record: dict[str, Any] | None,
) -> tuple[dict[str, Any], int]:
    merged = _with_empty_alternates(record)
    if alt_record is None:
        return merged, 0

    if not merged.get("name_alt") and alt_record.get("name"):
        merged["name_alt"] = alt_record["name"]

    alt_associations: dict[str, dict[str, Any]] = {}
    for assoc in alt_record.get("associations") or []:
        if isinstance(assoc, dict) and assoc.get("name"):
            alt_associations.setdefault(assoc["name"], assoc)

    matched = 0
    for assoc in merged["associations"]:
        alt_assoc = alt_associations.get(assoc.get("name", ""))
        if alt_assoc is None:
            continue

        matched += 1
        assoc["perceived_name_alt"] = alt_assoc.get("perceived_name") or assoc.get(
            "perceived_name_alt"
        )
        assoc["role1_name_alt"] = alt_assoc.get("role1_name") or assoc.get("role1_name_alt")
        assoc["role2_name_alt"] = alt_assoc.get("role2_name") or assoc.get("role2_name_alt")

    return merged, matched
