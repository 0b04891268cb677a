class InvalidRegionError(Exception):
    """
    raised when a region definition cannot be parsed or describes an impossible locus
    """

    pass


class MissingReferenceError(Exception):
    """
    raised when the reference sequence for a region is not available in the loaded reference genome
    """

    pass
