from .oracle import utils, ops, gmpmath
from .arithmetic import evalctx, decoder, refloat, sampler

RC = ops.RC
Float = refloat.Float
FormatCtx = evalctx.FormatCtx
BINARY256 = evalctx.BINARY256
Encoding = decoder.Encoding
Kind = decoder.Kind

decode = decoder.decode
sample = sampler.sample

DomainError = utils.DomainError
ParseError = utils.ParseError

P = BINARY256.p
PM1 = BINARY256.pm1
EMAX = BINARY256.emax
EMIN = BINARY256.emin
MIN_EXP_SUBNORMAL = BINARY256.min_exp_subnormal
