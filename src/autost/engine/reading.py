import asyncio
import csv
import logging
from io import TextIOWrapper
from os import PathLike
from typing import TextIO, Union

from Bio import SeqIO

from autost.engine.exceptions.profiles import ProfileTableUnavailableException
from autost.engine.structures.profiles import ProfileTable

logger = logging.getLogger(__name__)

def _profile_table_name(handle: Union[str, PathLike[str], TextIO]) -> str:
    if isinstance(handle, (str, PathLike)):
        return str(handle)
    return str(getattr(handle, "name", handle))

def _read_profile_rows(profile_handle: TextIO) -> list[tuple[str, ...]]:
    reader = csv.reader(profile_handle, delimiter="\t", quoting=csv.QUOTE_NONE)
    return [tuple(row) for row in reader if len(row) > 0]

def read_profile_table(handle: Union[str, PathLike[str], TextIO]) -> ProfileTable:
    """
    Reads a tab-delimited profile table from a path or an open text handle.
    An open handle is read from its current position and left open.
    """
    profiles_name = _profile_table_name(handle)
    try:
        if isinstance(handle, (str, PathLike)):
            with open(handle, encoding="utf-8", newline="") as profile_handle:
                rows = _read_profile_rows(profile_handle)
        else:
            rows = _read_profile_rows(handle)
    except OSError as e:
        raise ProfileTableUnavailableException(profiles_name, e.strerror or str(e)) from e
    except (UnicodeDecodeError, csv.Error) as e:
        raise ProfileTableUnavailableException(profiles_name, str(e)) from e
    if len(rows) == 0:
        logger.debug("Profile table \"%s\" is empty.", profiles_name)
        return ProfileTable((), ())
    logger.debug("Read %d profiles across %d columns from \"%s\".", len(rows) - 1, len(rows[0]), profiles_name)
    return ProfileTable(rows[0], tuple(rows[1:]))

async def read_matched_allele_names(handle: Union[str, TextIOWrapper]) -> list[str]:
    # Record IDs of a matched allele FASTA are the allele names, e.g. ">adk-2"
    def parse_ids():
        return [fasta_sequence.id for fasta_sequence in SeqIO.parse(handle, "fasta")]
    return await asyncio.to_thread(parse_ids)
