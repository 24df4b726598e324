# digit storage with two representations:
#  small: digits live in an inline array of INLINE_DIGITS, owned outright
#  large: digits live in a DigitBuffer, possibly shared with other stores
# a shared buffer is only read through. any write first forks it
# (make_unshared), so sharing never shows between values.
# growing out of the inline array promotes to a buffer; copying a buffer
# whose size fits inline demotes back. mutation never demotes.

import logging
import struct

from digitarray import get_namespace
from digitbuffer import DigitBuffer
import mpn

logger = logging.getLogger(__name__)

INLINE_DIGITS = max(1, struct.calcsize('P') * 8 // mpn.DIGIT_BITS)

class DigitStore:
    def __init__(self, data=1, fill=0, *, xp=None):
        self._static = None
        self._buffer = None
        if type(data) is DigitStore:
            other = data
            xp = self.xp = other.xp
            if other._buffer is None:
                self._static = xp.asarray(other._static, copy=True)
            elif other._size <= INLINE_DIGITS:
                self._fill_static_from_other_dynamic(other)
            else:
                self._buffer = other._buffer.acquire()
            self._size = other._size
            return
        if xp is None and hasattr(data, '__array_namespace__'):
            xp = data.__array_namespace__()
        xp = self.xp = get_namespace(xp)
        if isinstance(data, int):
            size = data
            if size > INLINE_DIGITS:
                self._buffer = DigitBuffer(size, fill, xp=xp)
            else:
                self._static = xp.zeros(INLINE_DIGITS, dtype=xp.uint32)
                if fill:
                    self._static[:size] = fill
        else:
            if not hasattr(data, '__array_namespace__'):
                data = xp.asarray(list(data), dtype=xp.uint32)
            size = data.shape[0]
            if size > INLINE_DIGITS:
                self._buffer = DigitBuffer(data, xp=xp)
            else:
                self._static = xp.zeros(INLINE_DIGITS, dtype=xp.uint32)
                self._static[:size] = xp.astype(data, xp.uint32)
        self._size = size

    def _fill_static_from_other_dynamic(self, other):
        xp = self.xp
        mpn.ASSERT(other._size <= INLINE_DIGITS)
        logger.debug('demoting %d digits to inline storage', other._size)
        self._static = xp.zeros(INLINE_DIGITS, dtype=xp.uint32)
        self._static[:other._size] = other._buffer.data.data

    def _make_unshared(self):
        if self._buffer is not None and self._buffer.ref_count != 1:
            logger.debug('forking buffer shared by %d stores', self._buffer.ref_count)
            buffer = DigitBuffer(self._buffer)
            self._buffer.release()
            self._buffer = buffer

    @property
    def small(self):
        return self._buffer is None
    @property
    def shared(self):
        return self._buffer is not None and self._buffer.ref_count > 1

    def __len__(self):
        return self._size
    def __getitem__(self, idx):
        if not 0 <= idx < self._size:
            raise IndexError(idx)
        if self._buffer is None:
            return int(self._static[idx])
        return self._buffer.data[idx]
    def __setitem__(self, idx, value):
        if not 0 <= idx < self._size:
            raise IndexError(idx)
        if self._buffer is None:
            self._static[idx] = value
        else:
            self._make_unshared()
            self._buffer.data[idx] = value
    def __iter__(self):
        for idx in range(self._size):
            yield self[idx]
    def __eq__(a, b):
        if type(b) is not DigitStore:
            return NotImplemented
        if a._size != b._size:
            return False
        for idx in range(a._size):
            if a[idx] != b[idx]:
                return False
        return True
    def __repr__(self):
        kind = 'inline' if self._buffer is None else f'shared x{self._buffer.ref_count}'
        return f'DigitStore({self.tolist()!r}, {kind})'

    def tolist(self):
        return list(self)

    def back(self):
        if self._size == 0:
            raise IndexError('back of empty DigitStore')
        return self[self._size - 1]

    def append(self, value):
        if self._buffer is None and self._size + 1 <= INLINE_DIGITS:
            self._static[self._size] = value
        else:
            if self._buffer is None:
                # one-way promotion, later shrinking keeps the buffer
                logger.debug('promoting %d inline digits to a buffer', self._size)
                self._buffer = DigitBuffer(self._static[:self._size], xp=self.xp)
                self._static = None
            else:
                self._make_unshared()
            self._buffer.data.append(value)
        self._size += 1

    def pop(self):
        if self._size == 0:
            raise IndexError('pop from empty DigitStore')
        if self._buffer is None:
            self._size -= 1
            value = int(self._static[self._size])
            self._static[self._size] = 0
            return value
        self._make_unshared()
        self._size -= 1
        return self._buffer.data.pop()

    def release(self):
        buffer = self._buffer
        if buffer is not None:
            self._buffer = None
            self._size = 0
            self._static = self.xp.zeros(INLINE_DIGITS, dtype=self.xp.uint32)
            buffer.release()

    def __del__(self):
        # may run on a partly constructed store
        buffer = getattr(self, '_buffer', None)
        if buffer is not None:
            self._buffer = None
            buffer.release()

if __name__ == '__main__':
    import array_api_strict as xp

    big = DigitStore(INLINE_DIGITS + 2, 1, xp=xp)
    assert not big.small and big.tolist() == [1] * (INLINE_DIGITS + 2)
    alias = DigitStore(big)
    assert alias._buffer is big._buffer and big.shared
    alias[0] = 5
    assert big[0] == 1 and alias[0] == 5 and not big.shared
    while len(alias) > INLINE_DIGITS:
        alias.pop()
    assert not alias.small
    compact = DigitStore(alias)
    assert compact.small and compact == alias
    small = DigitStore(1, 3, xp=xp)
    for _ in range(INLINE_DIGITS):
        small.append(3)
    assert not small.small and small.tolist() == [3] * (INLINE_DIGITS + 1)
    del alias
    big.release()
    assert big.small and len(big) == 0
