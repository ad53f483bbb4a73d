import logging
import re
from dataclasses import dataclass
from typing import Iterable, Mapping, Union

from autost.engine.exceptions.profiles import MalformedAlleleNameException
from autost.engine.structures.mlst import Allele

logger = logging.getLogger(__name__)

ALLELE_NAME_SEPARATORS = re.compile(r"[-_]")

@dataclass(frozen=True)
class AlleleNameParseResult:
    allele_name: str
    allele: Union[Allele, None]
    error: Union[str, None] = None

    @property
    def successful(self) -> bool:
        return self.allele is not None

    def unwrap(self) -> Allele:
        if self.allele is None:
            raise MalformedAlleleNameException(self.allele_name, self.error or "unknown error")
        return self.allele

def normalize_locus_name(locus: str) -> str:
    return ALLELE_NAME_SEPARATORS.sub("", locus)

def parse_allele_name(allele_name: str) -> AlleleNameParseResult:
    """
    Splits a matched allele name such as ``adk-2`` or ``gyr_B-7`` into its locus
    and allele number. Only the last token is the allele number, every preceding
    token is rejoined with ``-`` to form the locus (``gyr-B`` above).
    """
    tokens = ALLELE_NAME_SEPARATORS.split(allele_name.strip())
    if len(tokens) < 2:
        return AlleleNameParseResult(allele_name, None, "no '-' or '_' separator present")
    allele_number = tokens.pop()
    locus = "-".join(tokens)
    if len(allele_number) == 0:
        return AlleleNameParseResult(allele_name, None, "allele number is empty")
    if len(normalize_locus_name(locus)) == 0:
        return AlleleNameParseResult(allele_name, None, "locus name is empty")
    return AlleleNameParseResult(allele_name, Allele(locus, allele_number))

def build_allele_index(allele_names: Iterable[str]) -> Mapping[str, str]:
    """
    Maps each locus (separators removed) to its matched allele number.

    Raises MalformedAlleleNameException for a name that cannot be split. When a
    locus appears more than once the last allele number wins.
    """
    allele_to_number: dict[str, str] = {}
    for allele_name in allele_names:
        allele = parse_allele_name(allele_name).unwrap()
        locus_key = normalize_locus_name(allele.allele_locus)
        if locus_key in allele_to_number and allele_to_number[locus_key] != allele.allele_variant:
            logger.warning(
                "Locus \"%s\" matched more than once (%s and %s), keeping %s.",
                locus_key, allele_to_number[locus_key], allele.allele_variant, allele.allele_variant
            )
        allele_to_number[locus_key] = allele.allele_variant
    logger.debug("Built allele index over %d loci.", len(allele_to_number))
    return allele_to_number
