"""
module responsible for small utility functions and constants used throughout the fusepoint package
"""
import os
import re
from typing import List

from Bio.Seq import Seq

from .util import cast_boolean

PROGNAME: str = 'fusepoint'
EXIT_OK: int = 0


class FusepointNamespace:
    """
    Namespace to hold module constants

    Example:
        >>> nspace = FusepointNamespace(thing=1, otherthing=2)
        >>> nspace.thing
        1
        >>> nspace.otherthing
        2
    """

    def __init__(self, *pos, **kwargs):
        object.__setattr__(self, '_defns', {})
        object.__setattr__(self, '_types', {})
        object.__setattr__(self, '_members', {})
        object.__setattr__(self, '_env_prefix', 'FUSEPOINT')

        for k in pos:
            if k in self._members:
                raise AttributeError('Cannot respecify existing attribute', k, self._members[k])
            self[k] = k

        for attr, val in kwargs.items():
            if attr in self._members:
                raise AttributeError('Cannot respecify existing attribute', attr, self._members[attr])
            self[attr] = val

        for attr, value in self._members.items():
            self._set_type(attr, type(value))

    def __repr__(self):
        return '{}({})'.format(
            self.__class__.__name__,
            ', '.join(sorted(['{}={}'.format(k, repr(v)) for k, v in self.items()])),
        )

    def get_env_name(self, attr: str) -> str:
        """
        Get the name of the corresponding environment variable

        Example:
            >>> nspace = FusepointNamespace(a=1)
            >>> nspace.get_env_name('a')
            'FUSEPOINT_A'
        """
        return '{}_{}'.format(self._env_prefix, attr).upper()

    def get_env_var(self, attr: str):
        """
        retrieve the environment variable definition of a given attribute
        """
        env_name = self.get_env_name(attr)
        env = os.environ[env_name].strip()
        attr_type = self._types.get(attr, str)
        return attr_type(env)

    def is_env_overwritable(self, attr: str) -> bool:
        """
        Returns:
            bool: True if the variable is overrided by specifying the environment variable equivalent
        """
        return False

    def __getattribute__(self, attr):
        try:
            return object.__getattribute__(self, attr)
        except AttributeError as err:
            variables = object.__getattribute__(self, '_members')
            if attr not in variables:
                raise err
            if self.is_env_overwritable(attr):
                try:
                    return self.get_env_var(attr)
                except KeyError:
                    pass
            return variables[attr]

    def items(self):
        """
        Example:
            >>> FusepointNamespace(thing=1, otherthing=2).items()
            [('thing', 1), ('otherthing', 2)]
        """
        return [(k, self[k]) for k in self.keys()]

    def __getitem__(self, key):
        return getattr(self, key)

    def __setitem__(self, key, val):
        self.__setattr__(key, val)

    def __setattr__(self, attr, val):
        if attr.startswith('_'):
            raise ValueError('cannot set private', attr)
        object.__getattribute__(self, '_members')[attr] = val

    def keys(self) -> List[str]:
        return [k for k in self._members]

    def values(self) -> List:
        return [self[k] for k in self._members]

    def enforce(self, value):
        """
        checks that the current namespace has a given value

        Returns:
            the input value

        Raises:
            KeyError: the value did not exist

        Example:
            >>> nspace = FusepointNamespace(thing=1, otherthing=2)
            >>> nspace.enforce(1)
            1
            >>> nspace.enforce(3)
            Traceback (most recent call last):
            ....
        """
        if value not in self.values():
            raise KeyError('value {0} is not a valid member of '.format(repr(value)), self.values())
        return value

    def _set_type(self, attr, cast_type):
        if cast_type == bool:
            self._types[attr] = cast_boolean
        else:
            self._types[attr] = cast_type

    def define(self, attr: str) -> str:
        """
        Get the definition of a given attribute, used in generating help menus

        Raises:
            KeyError: the attribute does not have a definition
        """
        return self._defns[attr]

    def add(self, attr, value, defn=None, cast_type=None):
        """
        Add an attribute to the name space

        Args:
            attr (str): name of the attribute being added
            value: the value of the attribute
            defn (str): the definition, will be used in generating help menus
            cast_type (callable): the function to use in casting the value
        """
        if cast_type:
            self._set_type(attr, cast_type)
        else:
            self._set_type(attr, type(value))
        if defn:
            self._defns[attr] = defn
        self[attr] = value

    def __call__(self, value):
        try:
            return self.enforce(value)
        except KeyError:
            raise TypeError(
                'Invalid value {} for {}. Must be a valid member: {}'.format(
                    repr(value), self.__class__.__name__, self.values()
                )
            )


class WeakFusepointNamespace(FusepointNamespace):
    def is_env_overwritable(self, attr):
        return True


def reverse_complement(s: str) -> str:
    """
    wrapper for the Bio.Seq reverse_complement method

    Args:
        s: the input DNA sequence

    Returns:
        str: the reverse complement of the input sequence

    Warning:
        assumes the input is a DNA sequence

    Example:
        >>> reverse_complement('ATCCGGT')
        'ACCGGAT'
    """
    input_string = str(s)
    if not re.match('^[A-Za-z]*$', input_string):
        raise ValueError('unexpected sequence format. cannot reverse complement', input_string)
    seq = Seq(input_string)
    return str(seq.reverse_complement())


STRAND = FusepointNamespace(POS='+', NEG='-')
""":class:`FusepointNamespace`: holds controlled vocabulary for allowed strand values

- ``POS``: the positive/forward strand
- ``NEG``: the negative/reverse strand
"""

EVENT_TYPE = FusepointNamespace(DEL='Deletion', FUSION='Fusion')
""":class:`FusepointNamespace`: holds controlled vocabulary for the event classification of a breakpoint call

- ``DEL``: both breakpoints on the same contig and strand
- ``FUSION``: different contigs, or opposing strands on the same contig
"""

CLUSTER_MODE = FusepointNamespace(CHAINED='chained', STRICT='strict')
""":class:`FusepointNamespace`: holds controlled vocabulary for the membership test used when adding matches

- ``CHAINED``: a match joins a result if it agrees with any existing member
- ``STRICT``: a match joins a result only if it agrees with every existing member
"""

DEFAULTS = WeakFusepointNamespace()
DEFAULTS.add(
    'breakpoint_tolerance',
    3,
    defn='maximum distance (inclusive) between the positions of two matches, on each side, for them to '
    'be considered evidence of the same breakpoint',
)
DEFAULTS.add(
    'refine_shift',
    3,
    defn='the breakpoint of each match is tested at every offset from -refine_shift to +refine_shift',
)
DEFAULTS.add(
    'refine_compare_length',
    20,
    defn='maximum number of bases on each side of the read break compared against the reference flanks',
)
DEFAULTS.add(
    'cluster_mode',
    CLUSTER_MODE.CHAINED,
    cast_type=CLUSTER_MODE,
    defn='membership test used when grouping matches into results',
)

MAX_EDIT_SCORE: int = 0xFFFF
"""sentinel score larger than any score produced during breakpoint refinement"""
