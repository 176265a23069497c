"""Format contexts: the parameters of the fixed-width binary formats values are decoded into."""


binary16_synonyms = {'binary16', 'float16', 'half'}
binary32_synonyms = {'binary32', 'float32', 'single', 'float'}
binary64_synonyms = {'binary64', 'float64', 'double'}
binary128_synonyms = {'binary128', 'float128', 'quadruple'}
binary256_synonyms = {'binary256', 'float256', 'f256', 'octuple'}


class FormatCtx(object):
    """Context for an IEEE 754-like binary interchange format.

    The format is described by its exponent field width es and total width nbits.
    From those:
      p                 significand precision in bits, including the hidden bit
      emax              largest exponent of a leading significand bit
      emin              smallest normal exponent, 1 - emax
      min_exp_subnormal exponent of the smallest subnormal quantum, emin - (p - 1)
    """

    es = 19
    nbits = 256

    def __init__(self, es=None, nbits=None):
        if es is None:
            es = self.es
        if nbits is None:
            nbits = self.nbits

        if es < 2 or nbits - es < 2:
            raise ValueError('unsupported format with es={}, nbits={}'.format(repr(es), repr(nbits)))

        self.es = es
        self.nbits = nbits
        self.p = nbits - es
        self.pm1 = self.p - 1
        self.emax = (1 << (es - 1)) - 1
        self.emin = 1 - self.emax
        self.min_exp_subnormal = self.emin - self.pm1

    def __repr__(self):
        return '{}(es={}, nbits={})'.format(type(self).__name__, repr(self.es), repr(self.nbits))

    def __str__(self):
        return '\n'.join([
            type(self).__name__ + ':',
            '    p: ' + str(self.p),
            '    emax: ' + str(self.emax),
            '    emin: ' + str(self.emin),
            '    min_exp_subnormal: ' + str(self.min_exp_subnormal),
        ])

    def __eq__(self, other):
        if isinstance(other, FormatCtx):
            return self.es == other.es and self.nbits == other.nbits
        return NotImplemented

    def __hash__(self):
        return hash((self.es, self.nbits))

    def is_normal_exp(self, e):
        """Is e, the exponent of a leading significand bit, in the normal range?"""
        return self.emin <= e <= self.emax


IEEE_esnbits = {}
IEEE_esnbits.update((k, (5, 16)) for k in binary16_synonyms)
IEEE_esnbits.update((k, (8, 32)) for k in binary32_synonyms)
IEEE_esnbits.update((k, (11, 64)) for k in binary64_synonyms)
IEEE_esnbits.update((k, (15, 128)) for k in binary128_synonyms)
IEEE_esnbits.update((k, (19, 256)) for k in binary256_synonyms)


used_ctxs = {}
def fmt_ctx(es, nbits):
    try:
        return used_ctxs[(es, nbits)]
    except KeyError:
        ctx = FormatCtx(es=es, nbits=nbits)
        used_ctxs[(es, nbits)] = ctx
        return ctx


def lookup(name):
    """Find a format context by name, like 'binary256' or 'double',
    or by an explicit 'float<es>,<nbits>' description.
    """
    namestr = str(name).lower()
    if namestr in IEEE_esnbits:
        return fmt_ctx(*IEEE_esnbits[namestr])

    # try to decipher custom type
    try:
        assert namestr.startswith('float')
        es, nbits = namestr[len('float'):].split(',')
        return fmt_ctx(int(es), int(nbits))
    except Exception:
        raise ValueError('unsupported format {}'.format(repr(name)))


BINARY256 = fmt_ctx(19, 256)
