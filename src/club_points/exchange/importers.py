from __future__ import annotations

import csv
import io
import logging
from dataclasses import dataclass, field
from typing import Iterable, Optional

from ..common.validators import clean_optional, coerce_points, normalize_cni
from ..core import constants as C
from ..core.enums import ParticipantStatus
from ..core.exceptions import FormatError
from ..members.model import Member

logger = logging.getLogger(__name__)

_IMPORT_COLUMNS = {
    "name": C.COL_NAME,
    "cni": C.COL_CNI,
    "cne": C.COL_CNE,
    "school_level": C.COL_SCHOOL_LEVEL,
    "whatsapp": C.COL_WHATSAPP,
}


@dataclass(frozen=True)
class SkipReason:
    line: int
    reason: str
    value: Optional[str] = None


@dataclass(frozen=True)
class ImportBatch:
    candidates: list[Member] = field(default_factory=list)
    skipped: list[SkipReason] = field(default_factory=list)
    # source line of each candidate, same order as candidates
    lines: list[int] = field(default_factory=list)


@dataclass(frozen=True)
class ExportedParticipant:
    """One row read back from a participants export."""

    name: str
    cni: Optional[str]
    cne: Optional[str]
    school_level: Optional[str]
    whatsapp: Optional[str]
    status: ParticipantStatus
    points: int


def _key(header: str) -> str:
    return header.strip().casefold()


def _guess_delimiter(first_line: str) -> str:
    # Spreadsheets in French locales save CSV with ';'.
    if ";" in first_line and "," not in first_line:
        return ";"
    return ","


def _read_rows(text: str, delimiter: Optional[str]) -> tuple[list[str], list[tuple[int, list[str]]]]:
    text = (text or "").lstrip("\ufeff")
    if not text.strip():
        raise FormatError("File is empty")

    delimiter = delimiter or _guess_delimiter(text.splitlines()[0])
    reader = csv.reader(io.StringIO(text), delimiter=delimiter)

    header: Optional[list[str]] = None
    rows: list[tuple[int, list[str]]] = []
    for values in reader:
        if not any(v.strip() for v in values):
            continue
        if header is None:
            header = [_key(h) for h in values]
            continue
        rows.append((reader.line_num, values))

    if header is None:
        raise FormatError("File is empty")
    return header, rows


def _cell(values: list[str], index: Optional[int]) -> str:
    if index is None or index >= len(values):
        return ""
    return values[index].strip()


def parse_import(
    text: str,
    existing_members: Iterable[Member] = (),
    *,
    delimiter: Optional[str] = None,
) -> ImportBatch:
    """Parse a member CSV into registration candidates.

    Rows with an empty name, or with a CNI already seen in this file or
    already registered, are skipped (never raised). A missing
    "Nom complet" column fails the whole file with FormatError.
    """

    header, rows = _read_rows(text, delimiter)

    index: dict[str, Optional[int]] = {}
    for field_name, column in _IMPORT_COLUMNS.items():
        k = _key(column)
        index[field_name] = header.index(k) if k in header else None

    if index["name"] is None:
        raise FormatError(f'CSV must contain a "{C.COL_NAME}" column.')

    registered = {normalize_cni(m.cni) for m in existing_members} - {None}
    seen_in_file: set[str] = set()

    candidates: list[Member] = []
    lines: list[int] = []
    skipped: list[SkipReason] = []

    for line, values in rows:
        name = _cell(values, index["name"])
        cni = clean_optional(_cell(values, index["cni"]))
        cni_key = normalize_cni(cni)

        if not name:
            skipped.append(SkipReason(line=line, reason="missing name", value=cni))
            continue
        if cni_key and cni_key in registered:
            skipped.append(SkipReason(line=line, reason="CNI already registered", value=cni))
            continue
        if cni_key and cni_key in seen_in_file:
            skipped.append(SkipReason(line=line, reason="duplicate CNI in file", value=cni))
            continue

        if cni_key:
            seen_in_file.add(cni_key)
        lines.append(line)
        candidates.append(
            Member(
                member_id=None,
                name=name,
                cni=cni,
                cne=clean_optional(_cell(values, index["cne"])),
                school_level=clean_optional(_cell(values, index["school_level"])),
                whatsapp=clean_optional(_cell(values, index["whatsapp"])),
            )
        )

    for s in skipped:
        logger.info("Import line %d skipped: %s (%s)", s.line, s.reason, s.value or "-")
    return ImportBatch(candidates=candidates, skipped=skipped, lines=lines)


def read_participants_export(text: str, *, delimiter: Optional[str] = None) -> list[ExportedParticipant]:
    """Read back a file produced by export_participants."""

    header, rows = _read_rows(text, delimiter)
    required = [C.COL_NAME, C.COL_STATUS, C.COL_POINTS]
    missing = [c for c in required if _key(c) not in header]
    if missing:
        raise FormatError(f"Missing column(s): {', '.join(missing)}")

    def idx(column: str) -> Optional[int]:
        k = _key(column)
        return header.index(k) if k in header else None

    out: list[ExportedParticipant] = []
    for line, values in rows:
        raw_status = _cell(values, idx(C.COL_STATUS)).lower() or ParticipantStatus.UNMARKED.value
        try:
            status = ParticipantStatus(raw_status)
        except ValueError:
            raise FormatError(f"Line {line}: invalid status {raw_status!r}")

        out.append(
            ExportedParticipant(
                name=_cell(values, idx(C.COL_NAME)),
                cni=clean_optional(_cell(values, idx(C.COL_CNI))),
                cne=clean_optional(_cell(values, idx(C.COL_CNE))),
                school_level=clean_optional(_cell(values, idx(C.COL_SCHOOL_LEVEL))),
                whatsapp=clean_optional(_cell(values, idx(C.COL_WHATSAPP))),
                status=status,
                points=coerce_points(_cell(values, idx(C.COL_POINTS))),
            )
        )
    return out
