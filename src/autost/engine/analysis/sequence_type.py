from collections import Counter
from enum import Enum
import logging
from os import PathLike
import threading
from typing import Iterable, Mapping, TextIO, Union

from autost.engine.analysis.alleles import build_allele_index
from autost.engine.reading import read_profile_table
from autost.engine.structures.mlst import ExactSequenceType, NearestSequenceType, NoMatch, SequenceTypeResult
from autost.engine.structures.profiles import ProfileTable

logger = logging.getLogger(__name__)

class NearestMatchPolicy(Enum):
    # Picks the candidate with the fewest agreeing loci. Long standing default.
    LOWEST_FREQUENCY = "lowest_frequency"
    LOWEST_SEQUENCE_TYPE = "lowest_sequence_type"
    HIGHEST_FREQUENCY = "highest_frequency"

DEFAULT_NEAREST_MATCH_POLICY = NearestMatchPolicy.LOWEST_FREQUENCY

def sequence_type_sort_key(sequence_type: str) -> tuple[int, int, str]:
    """Integer STs first in numeric order, anything else after them by text."""
    try:
        return (0, int(sequence_type), sequence_type)
    except ValueError:
        return (1, 0, sequence_type)

def allele_numbers_equal(matched: str, profiled: str) -> bool:
    matched = matched.strip()
    profiled = profiled.strip()
    try:
        return float(matched) == float(profiled)
    except ValueError:
        return matched == profiled

def score_sequence_types(profiles: ProfileTable, allele_to_number: Mapping[str, str]) -> Counter:
    """
    Counts, for every sequence type in the table, the loci at which its profile
    agrees with the matched allele numbers. Sequence types with no agreeing locus
    do not appear in the result.
    """
    sequence_type_freq: Counter = Counter()
    header = profiles.normalized_header
    for row in profiles.rows:
        sequence_type = row[0]
        for column in profiles.scorable_columns(row):
            locus = header[column]
            if locus not in allele_to_number:
                continue
            if not allele_numbers_equal(allele_to_number[locus], row[column]):
                continue
            sequence_type_freq[sequence_type] += 1
    return sequence_type_freq

def resolve_sequence_type(sequence_type_freq: Mapping[str, int], loci_count: int, nearest_policy: NearestMatchPolicy = DEFAULT_NEAREST_MATCH_POLICY) -> SequenceTypeResult:
    if len(sequence_type_freq) == 0:
        return NoMatch()

    exact_matches = [sequence_type for sequence_type, frequency in sequence_type_freq.items() if frequency == loci_count]
    if len(exact_matches) > 0:
        if len(exact_matches) > 1:
            logger.warning("Profiles for sequence types %s are identical on all loci, reporting the lowest.", sorted(exact_matches, key=sequence_type_sort_key))
        return ExactSequenceType(min(exact_matches, key=sequence_type_sort_key))

    if nearest_policy is NearestMatchPolicy.LOWEST_SEQUENCE_TYPE:
        nearest = min(sequence_type_freq, key=sequence_type_sort_key)
    elif nearest_policy is NearestMatchPolicy.LOWEST_FREQUENCY:
        nearest = min(sequence_type_freq, key=lambda st: (sequence_type_freq[st], sequence_type_sort_key(st)))
    elif nearest_policy is NearestMatchPolicy.HIGHEST_FREQUENCY:
        nearest = min(sequence_type_freq, key=lambda st: (-sequence_type_freq[st], sequence_type_sort_key(st)))
    else:
        raise ValueError(f"Unknown nearest match policy \"{nearest_policy}\".")
    return NearestSequenceType(nearest)

class SequenceTypeResolver:
    """
    Looks up the sequence type for a set of matched allele names in an MLST
    profile table.

    The profile table, the allele index and the result are each computed once,
    on first use, and reused afterwards. First use is guarded by a lock so the
    profile table is read at most once even when an instance is shared between
    threads. Call :meth:`build` to do all of it up front.

    :param profiles_path: Path to, or open text handle on, the tab-delimited profile table.
    :param sequence_names: Matched allele names, e.g. ``["adk-2", "purA-3"]``.
    :param report_lowest_st: Report the lowest numbered candidate when there is
        no exact match instead of ranking candidates by agreeing loci.
    :param nearest_policy: Explicit nearest match policy, overrides ``report_lowest_st``.
    """

    def __init__(self, profiles_path: Union[str, PathLike[str], TextIO], sequence_names: Iterable[str], report_lowest_st: bool = False, nearest_policy: Union[NearestMatchPolicy, None] = None):
        self._profiles_path = profiles_path
        self._sequence_names = tuple(sequence_names)
        if nearest_policy is None:
            nearest_policy = NearestMatchPolicy.LOWEST_SEQUENCE_TYPE if report_lowest_st else DEFAULT_NEAREST_MATCH_POLICY
        self._nearest_policy = nearest_policy
        self._build_lock = threading.RLock()
        self._profiles: Union[ProfileTable, None] = None
        self._allele_to_number: Union[Mapping[str, str], None] = None
        self._result: Union[SequenceTypeResult, None] = None

    @property
    def profiles_path(self):
        return self._profiles_path

    @property
    def sequence_names(self) -> tuple[str, ...]:
        return self._sequence_names

    @property
    def nearest_policy(self) -> NearestMatchPolicy:
        return self._nearest_policy

    @property
    def report_lowest_st(self) -> bool:
        return self._nearest_policy is NearestMatchPolicy.LOWEST_SEQUENCE_TYPE

    @property
    def profiles(self) -> ProfileTable:
        if self._profiles is None:
            with self._build_lock:
                if self._profiles is None:
                    self._profiles = read_profile_table(self._profiles_path)
        return self._profiles

    @property
    def allele_to_number(self) -> Mapping[str, str]:
        if self._allele_to_number is None:
            with self._build_lock:
                if self._allele_to_number is None:
                    self._allele_to_number = build_allele_index(self._sequence_names)
        return self._allele_to_number

    @property
    def result(self) -> SequenceTypeResult:
        if self._result is None:
            with self._build_lock:
                if self._result is None:
                    self._result = self._resolve()
        return self._result

    def build(self) -> "SequenceTypeResolver":
        self.result
        return self

    def _resolve(self) -> SequenceTypeResult:
        profiles = self.profiles
        sequence_type_freq = score_sequence_types(profiles, self.allele_to_number)
        result = resolve_sequence_type(sequence_type_freq, profiles.loci_count, self._nearest_policy)
        logger.debug(
            "Resolved %s from %d candidate sequence types over %d loci (%s).",
            result, len(sequence_type_freq), profiles.loci_count, self._nearest_policy.value
        )
        return result

    @property
    def sequence_type(self) -> Union[str, None]:
        result = self.result
        if isinstance(result, ExactSequenceType):
            return result.sequence_type
        return None

    @property
    def nearest_sequence_type(self) -> Union[str, None]:
        result = self.result
        if isinstance(result, NearestSequenceType):
            return result.sequence_type
        return None

    @property
    def sequence_type_or_nearest(self) -> Union[str, None]:
        if self.sequence_type is not None:
            return self.sequence_type
        return self.nearest_sequence_type
