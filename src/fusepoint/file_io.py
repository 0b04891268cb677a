"""
module for loading the reference, region and match input files and writing the summary output
"""
import re
from typing import Dict, List

import pandas as pd
from Bio import SeqIO

from .error import InvalidRegionError, MissingReferenceError
from .match import Match
from .position import GenomicPosition
from .region import Exon, Region
from .util import cast_boolean, logger

MATCH_REQUIRED_COLUMNS = [
    'group',
    'left_contig',
    'left_position',
    'right_contig',
    'right_position',
    'gap',
    'read_break',
    'read',
]

SUMMARY_COLUMNS = [
    'cluster_id',
    'event_type',
    'left_pos',
    'right_pos',
    'left_contig',
    'left_position',
    'right_contig',
    'right_position',
    'total',
    'unique',
]


def load_reference_genome(*filepaths: str) -> Dict[str, str]:
    """
    Args:
        filepaths: the paths to the files containing the input fasta genomes

    Returns:
        a dictionary of the upper-cased sequences in the fasta files by name
    """
    reference_genome = {}
    for filename in filepaths:
        with open(filename, 'r') as fh:
            for record in SeqIO.parse(fh, 'fasta'):
                if record.id in reference_genome:
                    raise KeyError('Duplicate chromosome name', record.id, filename)
                reference_genome[record.id] = str(record.seq).upper()
    return reference_genome


def _parse_region_header(line: str, line_no: int) -> Region:
    match = re.match(r'^>([^,]+),\s*([^:\s]+):(\d+)-(\d+)\s*$', line)
    if not match:
        raise InvalidRegionError(f'line {line_no}: expected >NAME_TRANSCRIPT,CHR:START-END', line)
    label, chr, start, end = match.groups()
    name, transcript = label, None
    if '_' in label:
        name, transcript = label.split('_', 1)
    return Region(name, chr, int(start), int(end), transcript=transcript)


def load_regions(filepath: str) -> List[Region]:
    """
    read the region definitions. Each region is a header line followed by its exons

    Example:
        >EML4_ENST00000318522.5,chr2:42396490-42559688
        1,42396490,42396776
        2,42472645,42472827

    Returns:
        List[Region]: the regions in the order they were given. The index of each region is the contig
        used by the breakpoint positions
    """
    regions = []
    with open(filepath, 'r') as fh:
        for line_no, line in enumerate(fh, start=1):
            line = line.strip()
            if not line or line.startswith('#'):
                continue
            if line.startswith('>'):
                regions.append(_parse_region_header(line, line_no))
                continue
            if not regions:
                raise InvalidRegionError(f'line {line_no}: exon given before any region header', line)
            cols = [c.strip() for c in line.split(',')]
            if len(cols) != 3:
                raise InvalidRegionError(f'line {line_no}: expected exon_number,start,end', line)
            try:
                exon = Exon(*[int(c) for c in cols])
            except ValueError:
                raise InvalidRegionError(f'line {line_no}: exon columns must be integers', line)
            regions[-1].exons.append(exon)
    logger.info(f'loaded {len(regions)} regions from {filepath}')
    return regions


def region_reference(region: Region, reference_genome: Dict[str, str]) -> str:
    """
    Returns:
        str: the forward strand sequence of the region, indexed from the region start
    """
    names = [region.chr]
    if region.chr.startswith('chr'):
        names.append(region.chr[3:])
    else:
        names.append('chr' + region.chr)
    for name in names:
        if name in reference_genome:
            return str(reference_genome[name][region.start - 1:region.end])
    raise MissingReferenceError('region chromosome is not in the reference genome', region.name, region.chr)


def read_matches(filepath: str) -> Dict[str, List[Match]]:
    """
    reads a tab delimited file of matches. Each row is a single read

    Returns:
        Dict[str,List[Match]]: the matches by the group column, in file order
    """
    try:
        df = pd.read_csv(
            filepath,
            sep='\t',
            comment='#',
            dtype={
                'group': str,
                'read': str,
                'read_name': str,
                'reversed': str,
            },
            keep_default_na=False,
        )
    except pd.errors.EmptyDataError:
        return {}

    for col in MATCH_REQUIRED_COLUMNS:
        if col not in df:
            raise KeyError(f'missing required column: {col}')

    matches_by_group: Dict[str, List[Match]] = {}
    for row in df.to_dict('records'):
        match = Match(
            GenomicPosition(row['left_contig'], row['left_position']),
            GenomicPosition(row['right_contig'], row['right_position']),
            read=row['read'],
            read_break=row['read_break'],
            gap=row['gap'],
            read_name=row.get('read_name') or None,
            left_diff=int(row.get('left_diff', 0) or 0),
            right_diff=int(row.get('right_diff', 0) or 0),
            reversed=cast_boolean(row['reversed']) if row.get('reversed') else False,
        )
        matches_by_group.setdefault(row['group'], []).append(match)
    logger.info(f'read {len(df)} matches in {len(matches_by_group)} groups from {filepath}')
    return matches_by_group


def write_summary(filename: str, rows: List[Dict]):
    """
    write the summary rows to a tab delimited file
    """
    logger.info(f'writing: {filename}')
    df = pd.DataFrame.from_records(rows, columns=SUMMARY_COLUMNS)
    df = df.fillna('None')
    df.to_csv(filename, columns=SUMMARY_COLUMNS, index=False, sep='\t')
