from typing import Optional

from .position import GenomicPosition


class Match:
    """
    the evidence a single split read gives for a breakpoint. The part of the read up to and including
    read_break aligns to the left breakpoint and the remainder aligns to the right breakpoint
    """

    def __init__(
        self,
        left: GenomicPosition,
        right: GenomicPosition,
        read: str,
        read_break: int,
        gap: int = 0,
        read_name: Optional[str] = None,
        left_diff: int = 0,
        right_diff: int = 0,
        reversed: bool = False,
    ):
        """
        Args:
            left: the left breakpoint implied by this read
            right: the right breakpoint implied by this read
            read: the read sequence
            read_break: index in the read of the last base of the left aligned segment
            gap: distance between the two aligned segments on the read (0 for contiguous segments)
            read_name: name of the read
            left_diff: mismatches in the left aligned segment
            right_diff: mismatches in the right aligned segment
            reversed: the read was reverse complemented to align
        """
        self.left = left
        self.right = right
        self.read = str(read)
        self.read_break = int(read_break)
        self.gap = int(gap)
        self.read_name = read_name
        self.left_diff = left_diff
        self.right_diff = right_diff
        self.reversed = reversed

    @property
    def read_length(self) -> int:
        return len(self.read)

    def sort_key(self):
        return (self.read_break, self.read_length)

    def __repr__(self):
        return 'Match({}, {}, break={}, gap={})'.format(self.left, self.right, self.read_break, self.gap)

    def describe(self) -> str:
        """
        a description of the match followed by the read split at the break point

        Example:
            >>> Match(GenomicPosition(0, 9), GenomicPosition(1, 20), 'AAAACCCC', 3, read_name='r1').describe()
            'break:4, diff:(0 0), read direction: original direction, name: r1\\nAAAA CCCC\\n'
        """
        direction = 'reversed complement' if self.reversed else 'original direction'
        split = max(0, min(self.read_length, self.read_break + 1))
        return 'break:{}, diff:({} {}), read direction: {}, name: {}\n{} {}\n'.format(
            self.read_break + 1,
            self.left_diff,
            self.right_diff,
            direction,
            self.read_name if self.read_name is not None else '',
            self.read[:split],
            self.read[split:],
        )
