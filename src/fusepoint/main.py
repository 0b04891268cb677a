#!python
import argparse
import logging
import os
import platform
import sys
import time
from typing import Dict, List, Optional, Sequence

from shortuuid import uuid

from . import __version__
from . import config as _config
from . import util as _util
from .constants import CLUSTER_MODE, DEFAULTS, EXIT_OK, PROGNAME
from .file_io import load_reference_genome, load_regions, read_matches, region_reference, write_summary
from .match import Match
from .region import Region
from .result import FusionResult, sort_matches


def build_results(
    matches: List[Match],
    tolerance: int = DEFAULTS.breakpoint_tolerance,
    cluster_mode: str = DEFAULTS.cluster_mode,
) -> List[FusionResult]:
    """
    place each match of a single upstream group into the first result that it supports, starting a
    new result when none do

    Returns:
        List[FusionResult]: the results in the order they were started
    """
    results: List[FusionResult] = []
    for match in matches:
        for result in results:
            if result.supports(match):
                result.add_match(match)
                break
        else:
            result = FusionResult(cluster_mode=cluster_mode, tolerance=tolerance)
            result.add_match(match)
            results.append(result)
    return results


def refine_result(
    result: FusionResult,
    regions: Sequence[Region],
    references: Sequence[str],
    max_shift: int = DEFAULTS.refine_shift,
    compare_length: int = DEFAULTS.refine_compare_length,
) -> FusionResult:
    """
    drive a result through consensus, support counting, flank extraction, refinement and labelling

    Args:
        result: the result to finalize
        regions: the region descriptors indexed by contig
        references: the forward strand sequence of each region, indexed by contig
    """
    result.compute_consensus()
    result.matches[:] = sort_matches(result.matches)
    result.compute_unique_support()
    result.derive_reference_flanks(references[result.left.contig], references[result.right.contig])
    result.refine_breakpoints(max_shift=max_shift, compare_length=compare_length)
    result.build_title(regions)
    return result


def create_parser(argv):
    parser = argparse.ArgumentParser(
        prog=PROGNAME,
        formatter_class=_config.CustomHelpFormatter,
        description='refine split-read breakpoint calls against the reference',
        add_help=False,
    )
    required = parser.add_argument_group('required arguments')
    optional = parser.add_argument_group('optional arguments')
    optional.add_argument('-h', '--help', action='help', help='show this help message and exit')
    optional.add_argument(
        '-v',
        '--version',
        action='version',
        version='%(prog)s version ' + __version__,
        help='Outputs the version number',
    )
    optional.add_argument('--log', help='redirect stdout to a log file', default=None)
    optional.add_argument(
        '--log_level',
        help='level of logging to output',
        choices=['INFO', 'DEBUG'],
        default='INFO',
    )
    required.add_argument(
        '-m', '--matches', help='tab delimited file of grouped matches', required=True, type=_util.filepath
    )
    required.add_argument(
        '-g', '--regions', help='region definitions file', required=True, type=_util.filepath
    )
    required.add_argument(
        '-r',
        '--reference',
        nargs='+',
        help='path to the reference genome fasta file(s)',
        required=True,
        metavar='FILEPATH',
    )
    required.add_argument('-o', '--output', help='path to the output directory', required=True)
    optional.add_argument(
        '--tolerance',
        type=_config.non_negative_int,
        default=DEFAULTS.breakpoint_tolerance,
        help=DEFAULTS.define('breakpoint_tolerance'),
    )
    optional.add_argument(
        '--cluster_mode',
        choices=CLUSTER_MODE.values(),
        default=DEFAULTS.cluster_mode,
        help=DEFAULTS.define('cluster_mode'),
    )
    optional.add_argument(
        '--refine_shift',
        type=_config.non_negative_int,
        default=DEFAULTS.refine_shift,
        help=DEFAULTS.define('refine_shift'),
    )
    optional.add_argument(
        '--refine_compare_length',
        type=_config.non_negative_int,
        default=DEFAULTS.refine_compare_length,
        help=DEFAULTS.define('refine_compare_length'),
    )
    return parser, parser.parse_args(argv)


def main(argv: Optional[List[str]] = None):
    """
    sets up the parser and checks the validity of command line args
    loads the input files, refines every result and writes the outputs

    Args:
        argv: List of arguments, defaults to command line arguments
    """
    if argv is None:  # need to do at run time or patching will not behave as expected
        argv = sys.argv[1:]
    start_time = int(time.time())
    parser, args = create_parser(argv)

    log_conf = {
        'format': '{asctime} [{levelname}] {message}',
        'style': '{',
        'level': args.log_level,
    }

    original_logging_handlers = logging.root.handlers[:]
    for handler in logging.root.handlers:
        logging.root.removeHandler(handler)
    if args.log:
        log_conf['filename'] = args.log
    logging.basicConfig(**log_conf)

    _util.logger.info(f'fusepoint: {__version__}')
    _util.logger.info(f'hostname: {platform.node()}')
    _util.log_arguments(args)

    try:
        args.reference = _util.bash_expands(*args.reference)
    except FileNotFoundError:
        parser.error('--reference file(s) {} do not exist'.format(args.reference))

    try:
        regions = load_regions(args.regions)
        reference_genome = load_reference_genome(*args.reference)
        references = [region_reference(region, reference_genome) for region in regions]
        matches_by_group = read_matches(args.matches)

        summary_rows: List[Dict] = []
        _util.mkdirp(args.output)
        text_output = os.path.join(args.output, 'fusions.txt')
        _util.logger.info(f'writing: {text_output}')
        with open(text_output, 'w') as fh:
            for group, matches in matches_by_group.items():
                results = build_results(matches, tolerance=args.tolerance, cluster_mode=args.cluster_mode)
                _util.logger.info(f'group {group}: {len(matches)} matches in {len(results)} results')
                for result in results:
                    refine_result(
                        result,
                        regions,
                        references,
                        max_shift=args.refine_shift,
                        compare_length=args.refine_compare_length,
                    )
                    result.emit(fh)
                    row = result.to_dict()
                    row['cluster_id'] = 'cluster-' + uuid()
                    summary_rows.append(row)
        write_summary(os.path.join(args.output, 'fusions.tab'), summary_rows)

        duration = int(time.time()) - start_time
        _util.logger.info(f'run time (s): {duration}')
    finally:
        try:
            for handler in logging.root.handlers:
                logging.root.removeHandler(handler)
            for handler in original_logging_handlers:
                logging.root.addHandler(handler)
        except Exception as err:
            print(err)
    return EXIT_OK


if __name__ == '__main__':
    main()
