from copy import copy as _copy

from .constants import STRAND


class GenomicPosition:
    """
    a position within one of the input regions. The strand is encoded in the sign of the position:
    non-negative positions are offsets on the forward strand and negative positions are offsets on
    the reverse strand. Offsets are 0-indexed from the start of the region
    """

    @property
    def key(self):
        return (self.contig, self.position)

    def __init__(self, contig: int = 0, position: int = 0):
        """
        Args:
            contig: index of the region this position falls in
            position: the signed offset from the start of the region

        Examples:
            >>> GenomicPosition(1, 150)
            >>> GenomicPosition(1, -150)
        """
        self.contig = int(contig)
        self.position = int(position)

    @classmethod
    def from_strand(cls, contig: int, offset: int, strand: str) -> 'GenomicPosition':
        """
        build a position from an explicit strand and unsigned offset

        Example:
            >>> GenomicPosition.from_strand(1, 150, STRAND.NEG)
            GenomicPosition(1:-150)
        """
        if offset < 0:
            raise ValueError('offset must be non-negative when the strand is given explicitly', offset)
        if STRAND.enforce(strand) == STRAND.NEG:
            return cls(contig, -1 * offset)
        return cls(contig, offset)

    @property
    def strand(self) -> str:
        """:class:`str`: the strand implied by the sign of the position (offset 0 is reported as forward)"""
        return STRAND.NEG if self.position < 0 else STRAND.POS

    @property
    def offset(self) -> int:
        """:class:`int`: the unsigned offset from the start of the region"""
        return abs(self.position)

    def __repr__(self):
        return 'GenomicPosition({}:{})'.format(self.contig, self.position)

    def __eq__(self, other):
        if not hasattr(other, 'key'):
            return False
        return self.key == other.key

    def copy(self) -> 'GenomicPosition':
        return _copy(self)
