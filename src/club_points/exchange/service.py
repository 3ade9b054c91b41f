from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional

from ..core.exceptions import DuplicateKeyError, ValidationError
from ..members.model import Member
from ..members.service import MemberRegistry
from .importers import SkipReason, parse_import

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ImportSummary:
    imported: int
    skipped: int
    members: list[Member] = field(default_factory=list)
    reasons: list[SkipReason] = field(default_factory=list)


class ImportService:
    """Use case: bulk member import from CSV.

    Rows are registered one by one; a row that fails is counted as skipped
    and the batch goes on.
    """

    def __init__(self, registry: MemberRegistry):
        self._registry = registry

    def import_members(self, text: str, *, delimiter: Optional[str] = None) -> ImportSummary:
        batch = parse_import(text, self._registry.list_members(), delimiter=delimiter)

        created: list[Member] = []
        reasons: list[SkipReason] = list(batch.skipped)
        for line, candidate in zip(batch.lines, batch.candidates):
            try:
                created.append(self._registry.register(candidate))
            except (DuplicateKeyError, ValidationError) as e:
                logger.info("Import line %d skipped: %s", line, e)
                reasons.append(SkipReason(line=line, reason=str(e), value=candidate.cni))

        logger.info("Member import finished: imported=%d skipped=%d", len(created), len(reasons))
        return ImportSummary(imported=len(created), skipped=len(reasons), members=created, reasons=reasons)
