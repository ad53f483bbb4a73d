from dataclasses import dataclass
from functools import cached_property
from typing import Sequence

ProfileRow = tuple[str, ...]

CLONAL_COMPLEX_COLUMN = "clonal_complex"
MLST_CLADE_COLUMN = "mlst_clade"
SEQUENCE_TYPE_COLUMN = "ST"

# Annotation columns, never normalized and never scored
ANNOTATION_COLUMNS = frozenset({CLONAL_COMPLEX_COLUMN, MLST_CLADE_COLUMN})
EXCLUDED_COLUMNS = ANNOTATION_COLUMNS | {SEQUENCE_TYPE_COLUMN}

def normalize_header_field(field: str) -> str:
    if field in ANNOTATION_COLUMNS:
        return field
    return field.replace("_", "").replace("-", "")

@dataclass(frozen=True)
class ProfileTable:
    """
    A tab-delimited MLST profile table.

    The first column of every row holds the sequence type. The remaining columns
    are loci, optionally mixed with annotation columns such as ``clonal_complex``.
    Rows are kept as read; a data row shorter or longer than the header is not an
    error, the missing or extra cells simply never take part in scoring.
    """
    header: ProfileRow
    rows: Sequence[ProfileRow]

    @cached_property
    def normalized_header(self) -> ProfileRow:
        return tuple(normalize_header_field(field) for field in self.header)

    def is_scorable_column(self, column: int) -> bool:
        if column == 0 or column >= len(self.header):
            return False
        return self.normalized_header[column] not in EXCLUDED_COLUMNS

    def scorable_columns(self, row: ProfileRow) -> list[int]:
        return [column for column in range(len(row)) if self.is_scorable_column(column)]

    @property
    def loci_count(self) -> int:
        """Number of scorable loci, counted on the first data row."""
        if len(self.rows) == 0:
            return 0
        return len(self.scorable_columns(self.rows[0]))

    def __len__(self):
        return len(self.rows)
