import array_api_strict
import numpy
import pytest

from bigint import BigInt, PlainBigInt


@pytest.fixture(params=[numpy, array_api_strict], ids=['numpy', 'array_api_strict'])
def xp(request):
    return request.param


@pytest.fixture(params=[BigInt, PlainBigInt], ids=['store', 'plain'])
def cls(request):
    return request.param


@pytest.fixture
def rng():
    return numpy.random.default_rng(0)


def random_int(rng, max_digits, signed=True):
    """A random python int of up to max_digits base 2**32 digits."""
    n_bytes = 4 * int(rng.integers(1, max_digits + 1))
    value = int.from_bytes(rng.bytes(n_bytes), 'little')
    # sometimes clear the high half so lengths vary inside a digit
    if rng.integers(0, 2):
        value >>= int(rng.integers(0, 32))
    if signed and rng.integers(0, 2):
        value = -value
    return value
