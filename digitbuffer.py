# a reference counted digit sequence, shared between DigitStores.
#  the count is a plain int: sharing is single-threaded only.
#  copying a buffer never shares it, sharing is done by the owner
#  aliasing the buffer and calling acquire().

import logging

from digitarray import DigitArray
import mpn

logger = logging.getLogger(__name__)

class DigitBuffer:
    def __init__(self, data=0, fill=0, *, xp=None):
        if type(data) is DigitBuffer:
            mpn.ASSERT(data.data is not None, 'copy of a released DigitBuffer')
            self.data = DigitArray(data.data)
        elif type(data) is DigitArray:
            self.data = DigitArray(data)
        else:
            self.data = DigitArray(data, fill, xp=xp)
        self.ref_count = 1

    @property
    def xp(self):
        return self.data.xp

    def acquire(self):
        mpn.ASSERT(self.ref_count >= 1, 'acquire of a released DigitBuffer')
        self.ref_count += 1
        return self

    def release(self):
        if self.ref_count < 1:
            raise mpn.PreconditionError('release of a released DigitBuffer')
        self.ref_count -= 1
        if self.ref_count == 0:
            logger.debug('freeing buffer of %d digits', len(self.data))
            self.data = None

    def __repr__(self):
        digits = None if self.data is None else self.data.tolist()
        return f'DigitBuffer({digits!r}, ref_count={self.ref_count})'

if __name__ == '__main__':
    import array_api_strict as xp

    buf = DigitBuffer(3, 7, xp=xp)
    assert buf.data.tolist() == [7,7,7] and buf.ref_count == 1
    assert buf.acquire() is buf and buf.ref_count == 2
    fork = DigitBuffer(buf)
    assert fork.ref_count == 1 and buf.ref_count == 2
    fork.data[0] = 1
    assert buf.data[0] == 7
    buf.release()
    buf.release()
    assert buf.data is None
