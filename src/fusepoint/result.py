"""
Aggregation and refinement of the split-read matches supporting a single breakpoint call
"""
from typing import Iterable, List, Sequence

from .align import edit_distance
from .constants import CLUSTER_MODE, DEFAULTS, EVENT_TYPE, MAX_EDIT_SCORE, reverse_complement
from .match import Match
from .position import GenomicPosition
from .util import logger


def same_breakpoint(match1: Match, match2: Match, tolerance: int = DEFAULTS.breakpoint_tolerance) -> bool:
    """
    two matches describe the same breakpoint if they are on the same contigs and both positions
    are within the tolerance (inclusive) of each other

    Example:
        >>> m1 = Match(GenomicPosition(1, 100), GenomicPosition(2, 50), 'ACGT', 1)
        >>> m2 = Match(GenomicPosition(1, 103), GenomicPosition(2, 47), 'ACGT', 1)
        >>> same_breakpoint(m1, m2)
        True
    """
    if abs(match1.left.position - match2.left.position) > tolerance:
        return False
    if abs(match1.right.position - match2.right.position) > tolerance:
        return False
    if match1.left.contig != match2.left.contig:
        return False
    if match1.right.contig != match2.right.contig:
        return False
    return True


def truncated_mean(values: List[int]) -> int:
    """
    integer mean, rounded toward zero

    Example:
        >>> truncated_mean([1, 2])
        1
        >>> truncated_mean([-1, -2])
        -1
    """
    total = sum(values)
    quotient = abs(total) // len(values)
    return -1 * quotient if total < 0 else quotient


def extract_flank(reference: str, start: int, end: int) -> str:
    """
    pull the reference sequence between two signed positions (inclusive). Negative positions
    address the reverse strand and return the reverse complement of the forward sequence

    Args:
        reference: the forward strand sequence of the region
        start: the first signed position
        end: the last signed position

    Returns:
        str: the sequence, or an empty string if the positions are on different strands, out of bounds, or
        the reverse strand flank holds characters that cannot be complemented

    Example:
        >>> extract_flank('ACGTTTTTGG', 1, 4)
        'CGTT'
        >>> extract_flank('ACGTTTTTGG', -4, -1)
        'AACG'
    """
    if (start >= 0 and end <= 0) or (start <= 0 and end >= 0):
        return ''
    reference = str(reference)
    if abs(start) >= len(reference) or abs(end) >= len(reference):
        return ''
    length = abs(end - start) + 1
    if start < 0:
        try:
            return reverse_complement(reference[-1 * end:-1 * end + length])
        except ValueError as err:
            logger.debug(f'cannot reverse complement the reference flank {start}-{end}: {err}')
            return ''
    return reference[start:start + length]


class FusionResult:
    """
    collects the matches believed to support a single breakpoint and derives the consensus call.
    Matches are stored by reference and are owned by the caller. The stages are expected to be
    called in order: compute_consensus, compute_unique_support (on sorted matches),
    derive_reference_flanks, refine_breakpoints and build_title
    """

    def __init__(self, cluster_mode: str = DEFAULTS.cluster_mode, tolerance: int = DEFAULTS.breakpoint_tolerance):
        self.matches: List[Match] = []
        self.left = GenomicPosition()
        self.right = GenomicPosition()
        self.unique = 0
        self.left_ref = ''
        self.right_ref = ''
        self.title = ''
        self.left_pos = ''
        self.right_pos = ''
        self.cluster_mode = CLUSTER_MODE.enforce(cluster_mode)
        self.tolerance = tolerance

    def __len__(self):
        return len(self.matches)

    def __repr__(self):
        return 'FusionResult({}, {}, matches={}, unique={})'.format(
            self.left, self.right, len(self.matches), self.unique
        )

    def add_match(self, match: Match):
        self.matches.append(match)

    def supports(self, match: Match) -> bool:
        """
        check if a match is evidence for this result. In chained mode agreeing with any existing
        member is enough, so members can drift beyond the tolerance of the first member. In strict
        mode the match must agree with every member

        Returns:
            bool: True if the match belongs with this result
        """
        if self.cluster_mode == CLUSTER_MODE.STRICT:
            return bool(self.matches) and all(
                same_breakpoint(match, member, self.tolerance) for member in self.matches
            )
        for member in self.matches:
            if same_breakpoint(match, member, self.tolerance):
                return True
        return False

    def compute_consensus(self):
        """
        the first match with no gap between its aligned segments is used as-is, otherwise the
        breakpoint positions are the mean of all the matches
        """
        if not self.matches:
            return
        for match in self.matches:
            if match.gap == 0:
                self.left = match.left.copy()
                self.right = match.right.copy()
                return
        self.left = GenomicPosition(
            self.matches[0].left.contig, truncated_mean([m.left.position for m in self.matches])
        )
        self.right = GenomicPosition(
            self.matches[0].right.contig, truncated_mean([m.right.position for m in self.matches])
        )

    def compute_unique_support(self):
        # matches must already be sorted by Match.sort_key
        self.unique = 1
        for prev, curr in zip(self.matches, self.matches[1:]):
            if curr.sort_key() != prev.sort_key():
                self.unique += 1

    def is_deletion(self) -> bool:
        if self.left.contig != self.right.contig:
            return False
        if self.left.position >= 0 and self.right.position >= 0:
            return True
        if self.left.position < 0 and self.right.position < 0:
            return True
        return False

    @property
    def event_type(self) -> str:
        return EVENT_TYPE.DEL if self.is_deletion() else EVENT_TYPE.FUSION

    def derive_reference_flanks(self, left_reference: str, right_reference: str):
        """
        extract enough reference sequence on either side of the consensus breakpoints to cover the
        longest read segment on each side

        Args:
            left_reference: forward strand sequence of the region the left breakpoint is in
            right_reference: forward strand sequence of the region the right breakpoint is in
        """
        longest_left = 0
        longest_right = 0
        for match in self.matches:
            longest_left = max(longest_left, match.read_break + 1)
            longest_right = max(longest_right, match.read_length - (match.read_break + 1))

        self.left_ref = extract_flank(left_reference, self.left.position - longest_left + 1, self.left.position)
        self.right_ref = extract_flank(
            right_reference, self.right.position, self.right.position + longest_right - 1
        )
        if not self.left_ref or not self.right_ref:
            logger.debug(
                f'empty reference flank for {self.left} ({len(self.left_ref)}bp) / {self.right} ({len(self.right_ref)}bp)'
            )

    def shift_score(
        self, match: Match, shift: int, compare_length: int = DEFAULTS.refine_compare_length
    ) -> int:
        """
        score a candidate read break by the edit distance between the read segments adjacent to the
        shifted break and the reference flanks

        Returns:
            int: the sum of the left and right edit distances
        """
        seq = match.read
        left_len = max(0, min(len(seq), match.read_break + shift + 1))
        right_len = len(seq) - left_len
        left_seq = seq[:left_len]
        right_seq = seq[left_len:]

        left_comp = min(compare_length, left_len, len(self.left_ref))
        right_comp = min(compare_length, right_len, len(self.right_ref))

        left_ed = edit_distance(
            left_seq[len(left_seq) - left_comp:], self.left_ref[len(self.left_ref) - left_comp:]
        )
        right_ed = edit_distance(right_seq[:right_comp], self.right_ref[:right_comp])
        return left_ed + right_ed

    def refine_breakpoints(
        self,
        max_shift: int = DEFAULTS.refine_shift,
        compare_length: int = DEFAULTS.refine_compare_length,
    ):
        """
        slide the break of every match by up to max_shift bases in either direction, keeping the
        first shift with the lowest score. Shifts that would split the read outside its bounds are
        skipped. The read break and both breakpoint positions of the match are moved by the same amount
        """
        for match in self.matches:
            smallest_score = MAX_EDIT_SCORE
            best_shift = 0
            for shift in range(-1 * max_shift, max_shift + 1):
                # the split must stay within the read
                if not 0 <= match.read_break + shift + 1 <= match.read_length:
                    continue
                score = self.shift_score(match, shift, compare_length)
                if score < smallest_score:
                    smallest_score = score
                    best_shift = shift
            if best_shift:
                logger.debug(f'shifting the break of {match} by {best_shift} (score={smallest_score})')
            match.read_break += best_shift
            match.left.position += best_shift
            match.right.position += best_shift

    def build_title(self, regions: Sequence):
        """
        Args:
            regions: the region descriptors, indexed by contig
        """
        self.left_pos = regions[self.left.contig].pos2str(self.left.position)
        self.right_pos = regions[self.right.contig].pos2str(self.right.position)
        self.title = '{}: {}___{}  (total: {}, unique:{})'.format(
            self.event_type, self.left_pos, self.right_pos, len(self.matches), self.unique
        )

    def emit(self, fh):
        """
        write the title and a numbered description of each supporting match

        Args:
            fh: a writable text stream
        """
        fh.write('\n#{}\n'.format(self.title))
        for i, match in enumerate(self.matches):
            fh.write('>{}, {}'.format(i + 1, match.describe()))

    def to_dict(self) -> dict:
        return {
            'event_type': self.event_type,
            'left_contig': self.left.contig,
            'left_position': self.left.position,
            'right_contig': self.right.contig,
            'right_position': self.right.position,
            'left_pos': self.left_pos,
            'right_pos': self.right_pos,
            'total': len(self.matches),
            'unique': self.unique,
        }


def sort_matches(matches: Iterable[Match]) -> List[Match]:
    return sorted(matches, key=Match.sort_key)
