from dataclasses import dataclass
from typing import Union

@dataclass(frozen=True)
class Allele:
    allele_locus: str
    allele_variant: str

@dataclass(frozen=True)
class ExactSequenceType:
    sequence_type: str

@dataclass(frozen=True)
class NearestSequenceType:
    sequence_type: str

@dataclass(frozen=True)
class NoMatch:
    pass

SequenceTypeResult = Union[ExactSequenceType, NearestSequenceType, NoMatch]
