import argparse

from .util import cast_boolean, filepath


def non_negative_int(num):
    """
    cast input to an integer that is zero or greater

    Raises:
        argparse.ArgumentTypeError: if the input is not an integer or is negative
    """
    try:
        num = int(num)
    except ValueError:
        raise argparse.ArgumentTypeError('Must be an integer >= 0')
    if num < 0:
        raise argparse.ArgumentTypeError('Must be an integer >= 0')
    return num


class CustomHelpFormatter(argparse.ArgumentDefaultsHelpFormatter):
    """
    subclass the default help formatter to stop default printing for required arguments
    """

    def _format_args(self, action, default_metavar):
        if action.metavar is None:
            action.metavar = get_metavar(action.type)
        return super(CustomHelpFormatter, self)._format_args(action, default_metavar)

    def _get_help_string(self, action):
        if action.required:
            return action.help
        return super(CustomHelpFormatter, self)._get_help_string(action)

    def add_arguments(self, actions):
        # sort the arguments alphanumerically so they print in the help that way
        actions = sorted(actions, key=lambda x: getattr(x, 'option_strings'))
        super(CustomHelpFormatter, self).add_arguments(actions)


def get_metavar(arg_type):
    """
    For a given argument type, returns the string to be used for the metavar argument in add_argument

    Example:
        >>> get_metavar(bool)
        '{True,False}'
    """
    if arg_type in [bool, cast_boolean]:
        return '{True,False}'
    elif arg_type == float:
        return 'FLOAT'
    elif arg_type in [int, non_negative_int]:
        return 'INT'
    elif arg_type == filepath:
        return 'FILEPATH'
    return None
