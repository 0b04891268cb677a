import io

import pytest

from fusepoint.constants import CLUSTER_MODE, EVENT_TYPE, reverse_complement
from fusepoint.position import GenomicPosition
from fusepoint.region import Region
from fusepoint.result import FusionResult, extract_flank, same_breakpoint, sort_matches, truncated_mean

from ..util import LEFT_FLANK, RIGHT_FLANK, mock_match


def result_with(*matches, **kwargs):
    result = FusionResult(**kwargs)
    for match in matches:
        result.add_match(match)
    return result


class TestSameBreakpoint:
    def test_within_tolerance(self):
        assert same_breakpoint(mock_match(100, 200), mock_match(103, 197))

    def test_left_delta_outside_tolerance(self):
        assert not same_breakpoint(mock_match(100, 200), mock_match(104, 200))

    def test_right_delta_outside_tolerance(self):
        assert not same_breakpoint(mock_match(100, 200), mock_match(100, 204))

    def test_left_contig_differs(self):
        assert not same_breakpoint(mock_match(100, 200), mock_match(100, 200, left_contig=2))

    def test_right_contig_differs(self):
        assert not same_breakpoint(mock_match(100, 200), mock_match(100, 200, right_contig=2))

    def test_custom_tolerance(self):
        assert same_breakpoint(mock_match(100, 200), mock_match(105, 200), tolerance=5)
        assert not same_breakpoint(mock_match(100, 200), mock_match(106, 200), tolerance=5)

    def test_opposite_strands_compared_by_signed_position(self):
        assert same_breakpoint(mock_match(1, 200), mock_match(-1, 200))
        assert not same_breakpoint(mock_match(2, 200), mock_match(-2, 200))


class TestSupports:
    def test_empty_result(self):
        assert not FusionResult().supports(mock_match(100, 200))

    def test_chained_drift(self):
        first = mock_match(100, 200)
        second = mock_match(103, 203)
        candidate = mock_match(106, 206)
        result = result_with(first, second)
        assert not same_breakpoint(first, candidate)
        assert result.supports(candidate)

    def test_strict_mode_requires_every_member(self):
        first = mock_match(100, 200)
        second = mock_match(103, 203)
        result = result_with(first, second, cluster_mode=CLUSTER_MODE.STRICT)
        assert not result.supports(mock_match(106, 206))
        assert result.supports(mock_match(102, 202))

    def test_bad_cluster_mode(self):
        with pytest.raises(KeyError):
            FusionResult(cluster_mode='centroid')


class TestComputeConsensus:
    def test_first_zero_gap_match_wins(self):
        result = result_with(
            mock_match(100, 100, gap=2), mock_match(150, 150, gap=0), mock_match(200, 200, gap=3)
        )
        result.compute_consensus()
        assert result.left == GenomicPosition(1, 150)
        assert result.right == GenomicPosition(1, 150)

    def test_later_zero_gap_match_ignored(self):
        result = result_with(mock_match(100, 300, gap=0), mock_match(102, 302, gap=0))
        result.compute_consensus()
        assert result.left.position == 100
        assert result.right.position == 300

    def test_mean_truncates(self):
        result = result_with(mock_match(1, 10, gap=1), mock_match(2, 13, gap=1))
        result.compute_consensus()
        assert result.left.position == 1
        assert result.right.position == 11

    def test_mean_takes_contig_from_first_match(self):
        result = result_with(
            mock_match(10, 20, left_contig=3, right_contig=4), mock_match(12, 22, left_contig=3, right_contig=4)
        )
        result.compute_consensus()
        assert result.left == GenomicPosition(3, 11)
        assert result.right == GenomicPosition(4, 21)

    def test_negative_mean_truncates_toward_zero(self):
        result = result_with(mock_match(-1, -10), mock_match(-2, -13))
        result.compute_consensus()
        assert result.left.position == -1
        assert result.right.position == -11

    def test_empty_is_noop(self):
        result = FusionResult()
        result.compute_consensus()
        assert result.left == GenomicPosition(0, 0)
        assert result.right == GenomicPosition(0, 0)

    def test_consensus_is_a_copy(self):
        match = mock_match(100, 200, gap=0)
        result = result_with(match)
        result.compute_consensus()
        match.left.position += 2
        assert result.left.position == 100


class TestTruncatedMean:
    def test_positive(self):
        assert truncated_mean([1, 2, 2]) == 1

    def test_negative(self):
        assert truncated_mean([-1, -2, -2]) == -1


class TestComputeUniqueSupport:
    def test_sorted(self):
        result = result_with(
            mock_match(1, 1, read_break=5, read_length=10),
            mock_match(1, 1, read_break=5, read_length=10),
            mock_match(1, 1, read_break=7, read_length=12),
        )
        result.compute_unique_support()
        assert result.unique == 2

    def test_same_break_different_length(self):
        result = result_with(
            mock_match(1, 1, read_break=5, read_length=10), mock_match(1, 1, read_break=5, read_length=11)
        )
        result.compute_unique_support()
        assert result.unique == 2

    def test_unsorted_inflates_count(self):
        result = result_with(
            mock_match(1, 1, read_break=5, read_length=10),
            mock_match(1, 1, read_break=7, read_length=12),
            mock_match(1, 1, read_break=5, read_length=10),
        )
        result.compute_unique_support()
        assert result.unique == 3
        result.matches[:] = sort_matches(result.matches)
        result.compute_unique_support()
        assert result.unique == 2

    def test_empty(self):
        result = FusionResult()
        result.compute_unique_support()
        assert result.unique == 1


class TestIsDeletion:
    def consensus(self, left, right):
        result = FusionResult()
        result.left = GenomicPosition(*left)
        result.right = GenomicPosition(*right)
        return result

    def test_same_contig_forward(self):
        assert self.consensus((1, 50), (1, 80)).is_deletion()

    def test_same_contig_reverse(self):
        assert self.consensus((1, -50), (1, -80)).is_deletion()

    def test_different_contig(self):
        result = self.consensus((1, 50), (2, 80))
        assert not result.is_deletion()
        assert result.event_type == EVENT_TYPE.FUSION

    def test_opposite_strands(self):
        assert not self.consensus((1, 50), (1, -80)).is_deletion()
        assert not self.consensus((1, -50), (1, 80)).is_deletion()

    def test_zero_counts_as_forward(self):
        assert self.consensus((1, 0), (1, 80)).is_deletion()
        assert not self.consensus((1, 0), (1, -80)).is_deletion()


class TestExtractFlank:
    REF = 'ACGTACGTTGCAAGGCTTAC'

    def test_forward(self):
        assert extract_flank(self.REF, 2, 5) == 'GTAC'

    def test_reverse(self):
        assert extract_flank(self.REF, -10, -1) == reverse_complement(self.REF[1:11])

    def test_reverse_given_end_first(self):
        assert extract_flank(self.REF, -1, -10) == reverse_complement(self.REF[10:20])

    def test_mismatched_strands(self):
        assert extract_flank(self.REF, -5, 5) == ''
        assert extract_flank(self.REF, 5, -5) == ''

    def test_zero_boundary(self):
        assert extract_flank(self.REF, 0, 5) == ''
        assert extract_flank(self.REF, -5, 0) == ''

    def test_out_of_bounds(self):
        assert extract_flank(self.REF, 10, 20) == ''
        assert extract_flank(self.REF, 20, 25) == ''
        assert extract_flank(self.REF, -20, -1) == ''
        assert extract_flank(self.REF, 10, 19) == self.REF[10:]

    def test_reverse_with_gap_characters(self):
        reference = 'ACGT-ACGTTGCA'
        assert extract_flank(reference, -5, -2) == ''
        assert extract_flank(reference, 2, 5) == 'GT-A'


class TestDeriveReferenceFlanks:
    def test_covers_longest_segments(self):
        left_reference = 'CATCATCATC' + LEFT_FLANK
        right_reference = 'AAA' + RIGHT_FLANK + 'CATCATC'
        result = result_with(
            mock_match(19, 3, read_break=9, read=LEFT_FLANK + RIGHT_FLANK, gap=0),
            mock_match(17, 1, read_break=7, read=LEFT_FLANK + RIGHT_FLANK, gap=1),
        )
        result.compute_consensus()
        result.derive_reference_flanks(left_reference, right_reference)
        assert result.left_ref == LEFT_FLANK
        assert result.right_ref == RIGHT_FLANK + 'CA'

    def test_reverse_strand(self):
        left_reference = 'TTTTT' + reverse_complement(LEFT_FLANK) + 'GGGGG'
        result = result_with(mock_match(-5, 3, read_break=9, read=LEFT_FLANK + RIGHT_FLANK, gap=0))
        result.compute_consensus()
        result.derive_reference_flanks(left_reference, 'AAA' + RIGHT_FLANK + 'CATCATC')
        assert result.left_ref == LEFT_FLANK
        assert result.right_ref == RIGHT_FLANK

    def test_out_of_range_gives_empty_flank(self):
        result = result_with(mock_match(5, 3, read_break=9, read_length=20, gap=0))
        result.compute_consensus()
        result.derive_reference_flanks('A' * 20, 'A' * 20)
        assert result.left_ref == ''
        assert result.right_ref == 'A' * 10


class TestRefineBreakpoints:
    def test_shift_to_best_alignment(self):
        match = mock_match(17, 1, read_break=7, read=LEFT_FLANK + RIGHT_FLANK)
        result = result_with(match)
        result.left_ref = LEFT_FLANK
        result.right_ref = RIGHT_FLANK
        assert result.shift_score(match, 2) == 0
        assert result.shift_score(match, 0) > 0
        result.refine_breakpoints()
        assert match.read_break == 9
        assert match.left.position == 19
        assert match.right.position == 3

    def test_refine_against_derived_flanks(self):
        exact = mock_match(19, 3, read_break=9, read=LEFT_FLANK + RIGHT_FLANK, gap=0)
        shifted = mock_match(17, 1, read_break=7, read=LEFT_FLANK + RIGHT_FLANK, gap=1)
        result = result_with(exact, shifted)
        result.compute_consensus()
        result.derive_reference_flanks('CATCATCATC' + LEFT_FLANK, 'AAA' + RIGHT_FLANK + 'CATCATC')
        result.refine_breakpoints()
        assert (exact.read_break, exact.left.position, exact.right.position) == (9, 19, 3)
        assert (shifted.read_break, shifted.left.position, shifted.right.position) == (9, 19, 3)
        # consensus is unaffected by refinement of the matches
        assert result.left.position == 19

    def test_tie_keeps_most_negative_shift(self):
        match = mock_match(10, 20, read_break=5, read_length=12)
        result = result_with(match)
        result.left_ref = 'A' * 10
        result.right_ref = 'A' * 10
        result.refine_breakpoints()
        assert match.read_break == 2
        assert match.left.position == 7
        assert match.right.position == 17

    def test_empty_flanks_keep_first_shift(self):
        match = mock_match(10, 20, read_break=5, read=LEFT_FLANK + RIGHT_FLANK)
        result = result_with(match)
        result.refine_breakpoints()
        assert match.read_break == 2

    def test_shift_past_read_end(self):
        match = mock_match(10, 20, read_break=9, read=LEFT_FLANK)
        result = result_with(match)
        result.left_ref = LEFT_FLANK
        result.right_ref = RIGHT_FLANK
        assert result.shift_score(match, 3) == 0
        assert result.shift_score(match, 0) == 0
        assert result.shift_score(match, -3) > 0

    def test_break_stays_within_read(self):
        match = mock_match(10, 20, read_break=0, read=RIGHT_FLANK)
        result = result_with(match)
        result.left_ref = LEFT_FLANK
        result.right_ref = RIGHT_FLANK
        result.refine_breakpoints()
        assert match.read_break == -1
        assert match.left.position == 9
        assert match.right.position == 19

    def test_custom_window(self):
        match = mock_match(17, 1, read_break=7, read=LEFT_FLANK + RIGHT_FLANK)
        result = result_with(match)
        result.left_ref = LEFT_FLANK
        result.right_ref = RIGHT_FLANK
        result.refine_breakpoints(max_shift=1)
        assert match.read_break != 9


@pytest.fixture
def regions():
    return [
        Region('GENEA', '1', 101, 200),
        Region('GENEB', '1', 301, 400),
    ]


class TestBuildTitle:
    def test_fusion(self, regions):
        result = result_with(mock_match(19, 3, left_contig=0, right_contig=1, gap=0))
        result.compute_consensus()
        result.compute_unique_support()
        result.build_title(regions)
        assert result.left_pos == 'GENEA:+1:120'
        assert result.right_pos == 'GENEB:+1:304'
        assert result.title == 'Fusion: GENEA:+1:120___GENEB:+1:304  (total: 1, unique:1)'

    def test_deletion(self, regions):
        result = result_with(
            mock_match(-19, -50, left_contig=0, right_contig=0),
            mock_match(-21, -52, left_contig=0, right_contig=0, read_length=11),
        )
        result.compute_consensus()
        result.compute_unique_support()
        result.build_title(regions)
        assert result.title == 'Deletion: GENEA:-1:121___GENEA:-1:152  (total: 2, unique:2)'


class TestEmit:
    def test_output_format(self, regions):
        first = mock_match(19, 3, left_contig=0, right_contig=1, gap=0, read='AAAACCCC', read_break=3)
        first.read_name = 'read1'
        second = mock_match(19, 3, left_contig=0, right_contig=1, gap=0, read='AAAACCC', read_break=3)
        result = result_with(first, second)
        result.compute_consensus()
        result.compute_unique_support()
        result.build_title(regions)
        fh = io.StringIO()
        result.emit(fh)
        assert fh.getvalue() == (
            '\n#Fusion: GENEA:+1:120___GENEB:+1:304  (total: 2, unique:2)\n'
            '>1, break:4, diff:(0 0), read direction: original direction, name: read1\n'
            'AAAA CCCC\n'
            '>2, break:4, diff:(0 0), read direction: original direction, name: \n'
            'AAAA CCC\n'
        )
