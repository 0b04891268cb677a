"""
Sequence comparison helpers used in scoring candidate breakpoints
"""
import distance


def edit_distance(seq1: str, seq2: str) -> int:
    """
    levenshtein distance between two sequences

    Example:
        >>> edit_distance('ACGT', 'AGT')
        1
    """
    if not seq1:
        return len(seq2)
    if not seq2:
        return len(seq1)
    return distance.levenshtein(str(seq1), str(seq2))
