"""Command line front end for the test case generators.

Rows are written to stdout, one per line, fields separated by tabs. A decoded value
takes four fields: sign, exponent, high and low 128 bits of the significand.
"""

import sys
import time
from multiprocessing import Pool

import numpy as np

from ..arithmetic import evalctx
from ..arithmetic.decoder import Encoding
from .cases import generators, literal_classes, circular_funcs


# generators whose significands are printed in hex
hex_generators = {'circular'}


def format_field(x, hex_signif=False):
    if isinstance(x, Encoding):
        if hex_signif:
            return '{}\t{}\t0x{:032x}\t0x{:032x}'.format(x.sign, x.exp, x.hi, x.lo)
        else:
            return '{}\t{}\t{}\t{}'.format(x.sign, x.exp, x.hi, x.lo)
    elif isinstance(x, str):
        return '"{}"'.format(x)
    else:
        return str(x)

def format_row(row, hex_signif=False):
    return '\t'.join(format_field(x, hex_signif=hex_signif) for x in row)


def chunk_sizes(n, jobs):
    q, r = divmod(n, jobs)
    return [q + 1 if i < r else q for i in range(jobs)]

def run_chunk(task):
    name, n, seed_seq, es, nbits, options = task
    rng = np.random.default_rng(seed_seq)
    ctx = evalctx.fmt_ctx(es, nbits)
    return generators[name](n, rng, ctx, **options)

def generate(name, n, seed=None, jobs=1, ctx=evalctx.BINARY256, **options):
    """Run generator name for n cases, split over jobs processes.
    Every chunk draws from its own child of the seed, so the rows
    only depend on (seed, jobs).
    """
    if name not in generators:
        raise ValueError('unknown generator {}'.format(repr(name)))
    if jobs < 1:
        raise ValueError('need at least one job, got {}'.format(jobs))

    seed_seqs = np.random.SeedSequence(seed).spawn(jobs)
    tasks = [(name, k, ss, ctx.es, ctx.nbits, options)
             for k, ss in zip(chunk_sizes(n, jobs), seed_seqs)]

    if jobs == 1:
        results = [run_chunk(task) for task in tasks]
    else:
        with Pool(jobs) as p:
            results = p.map(run_chunk, tasks)

    return [row for rows in results for row in rows]


def make_parser():
    import argparse

    parser = argparse.ArgumentParser(
        description='generate test data for a fixed-width binary floating-point type')
    parser.add_argument('-n', '--n-test-data', type=int, default=25,
                        help='number of test data to generate')
    parser.add_argument('-s', '--seed', type=int, default=None,
                        help='seed for reproducible output')
    parser.add_argument('-j', '--jobs', type=int, default=1,
                        help='number of worker processes')
    parser.add_argument('--format', dest='fmt', default='binary256',
                        help='target format, like binary256 or float19,256')
    parser.add_argument('-v', '--verbose', action='store_true',
                        help='report progress on stderr')

    subparsers = parser.add_subparsers(dest='name', required=True)

    p = subparsers.add_parser('literal', help='decimal literals')
    p.add_argument('-t', '--type-of-num', choices=sorted(literal_classes), default='E',
                   help='E = fast exact, A = fast approx, N = normal, S = subnormal, X = extreme')

    for name in ['add', 'fma', 'sos', 'rem', 'sqrt', 'powi']:
        subparsers.add_parser(name, help='{} results'.format(name))

    p = subparsers.add_parser('circular', help='circular functions')
    p.add_argument('-f', '--func', choices=sorted(circular_funcs), default='sin')
    p.add_argument('-r', '--range', dest='range_name', choices=['1', 'C', 'S', 'L'], default='C',
                   help='1 = 0..1, C = 0..2pi, S = 2pi..2**240, L = 2**240..')

    p = subparsers.add_parser('format', help='scientific formatting')
    p.add_argument('-t', '--type-of-num', choices=['N', 'I', 'F', 'X', 'S'], default='N',
                   help='N = small float, I = small int, F = fraction, X = large int, S = subnormal')

    return parser


_common_args = {'n_test_data', 'seed', 'jobs', 'fmt', 'verbose', 'name'}

def main(argv=None):
    parser = make_parser()
    args = parser.parse_args(argv)

    try:
        ctx = evalctx.lookup(args.fmt)
    except ValueError as e:
        parser.error(str(e))

    options = {k: v for k, v in vars(args).items() if k not in _common_args}

    if args.verbose:
        print('generating {:d} {} cases for {!r}, seed={!r}, jobs={:d}'
              .format(args.n_test_data, args.name, ctx, args.seed, args.jobs),
              file=sys.stderr, flush=True)

    start = time.time()
    rows = generate(args.name, args.n_test_data, seed=args.seed, jobs=args.jobs, ctx=ctx, **options)
    elapsed = time.time() - start

    hex_signif = args.name in hex_generators
    for row in rows:
        print(format_row(row, hex_signif=hex_signif))
    sys.stdout.flush()

    if args.verbose:
        print('{:d} rows in {:.2f}s'.format(len(rows), elapsed), file=sys.stderr, flush=True)

    return 0


if __name__ == '__main__':
    sys.exit(main())
