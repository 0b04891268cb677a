from typing import List, Optional, Tuple

from .error import InvalidRegionError


class Exon:
    def __init__(self, number: int, start: int, end: int):
        """
        Args:
            number: the exon number in transcript order
            start: genomic start of the exon (inclusive)
            end: genomic end of the exon (inclusive)
        """
        if start > end:
            raise InvalidRegionError('exon start cannot be after its end', number, start, end)
        self.number = int(number)
        self.start = int(start)
        self.end = int(end)

    def __contains__(self, pos):
        return self.start <= pos <= self.end

    def __repr__(self):
        return 'Exon({}:{}-{})'.format(self.number, self.start, self.end)


class Region:
    """
    a named locus (usually a gene) that breakpoint positions are given relative to.
    Positions passed to this class are the signed offsets used by
    :class:`~fusepoint.position.GenomicPosition`
    """

    def __init__(
        self,
        name: str,
        chr: str,
        start: int,
        end: int,
        transcript: Optional[str] = None,
        exons: Optional[List[Exon]] = None,
    ):
        """
        Args:
            name: the display name of the region
            chr: the chromosome the region is on
            start: genomic start of the region (1-based, inclusive)
            end: genomic end of the region (1-based, inclusive)
            transcript: the transcript the exons belong to
            exons: exons of the transcript, in transcript order

        Example:
            >>> Region('EML4', 'chr2', 42396490, 42559688, transcript='ENST00000318522.5')
        """
        if start > end:
            raise InvalidRegionError('region start cannot be after its end', name, start, end)
        self.name = name
        self.chr = chr
        self.start = int(start)
        self.end = int(end)
        self.transcript = transcript
        self.exons = list(exons) if exons else []

    def __len__(self):
        return self.end - self.start + 1

    def __repr__(self):
        return 'Region({}, {}:{}-{})'.format(self.name, self.chr, self.start, self.end)

    def genomic_position(self, position: int) -> int:
        """
        Returns:
            int: the genomic coordinate of a signed offset within this region
        """
        return abs(position) + self.start

    def exon_or_intron(self, genomic_pos: int) -> Tuple[Optional[bool], int]:
        """
        Returns:
            Tuple[bool,int]: (True, exon number) if the position is in an exon, (False, intron number)
            if it is between two listed exons and (None, 0) otherwise. Introns take the smaller number
            of the two exons they separate
        """
        for exon in self.exons:
            if genomic_pos in exon:
                return True, exon.number
        for prev_exon, next_exon in zip(self.exons, self.exons[1:]):
            low = min(prev_exon.end, next_exon.end)
            high = max(prev_exon.start, next_exon.start)
            if low < genomic_pos < high:
                return False, min(prev_exon.number, next_exon.number)
        return None, 0

    def pos2str(self, position: int) -> str:
        """
        format a signed region offset for display

        Example:
            >>> region = Region('ALK', '2', 100, 500, exons=[Exon(1, 100, 200), Exon(2, 300, 500)])
            >>> region.pos2str(-150)
            'ALK:intron:1|-2:250'
        """
        genomic_pos = self.genomic_position(position)
        is_exon, number = self.exon_or_intron(genomic_pos)
        feature = ''
        if is_exon is not None:
            feature = '{}:{}|'.format('exon' if is_exon else 'intron', number)
        strand = '+' if position >= 0 else '-'
        return '{}:{}{}{}:{}'.format(self.name, feature, strand, self.chr, genomic_pos)
