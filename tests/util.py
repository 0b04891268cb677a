from fusepoint.match import Match
from fusepoint.position import GenomicPosition

# left/right flank pair with no internal periodicity, so a read made of LEFT_FLANK + RIGHT_FLANK
# only aligns perfectly when split between the two
LEFT_FLANK = 'GATTACAGCT'
RIGHT_FLANK = 'CCGGTTAAGG'


def mock_match(
    left_pos, right_pos, read_break=5, read_length=10, gap=1, left_contig=1, right_contig=1, read=None
):
    if read is None:
        read = 'A' * read_length
    return Match(
        GenomicPosition(left_contig, left_pos),
        GenomicPosition(right_contig, right_pos),
        read=read,
        read_break=read_break,
        gap=gap,
    )
