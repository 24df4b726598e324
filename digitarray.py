# a growable one-dimensional array of uint32 digits.
# storage is allocated from an array api namespace with power-of-two
# capacity, the live prefix is storage[:size].

import importlib

DEFAULT_NAMESPACE = 'numpy'

def get_namespace(xp=None):
    if xp is None:
        xp = importlib.import_module(DEFAULT_NAMESPACE)
    return xp

def ceil_exp_2(n):
    return 1 << (max(int(n), 1) - 1).bit_length()

class DigitArray:
    def __init__(self, data=1, fill=0, *, xp=None):
        if type(data) is DigitArray:
            xp = self.xp = data.xp
            self.size = data.size
            self.capacity = ceil_exp_2(self.size)
            self.storage = xp.zeros(self.capacity, dtype=xp.uint32)
            self.storage[:self.size] = data.storage[:self.size]
            return
        if xp is None and hasattr(data, '__array_namespace__'):
            xp = data.__array_namespace__()
        xp = self.xp = get_namespace(xp)
        if isinstance(data, int):
            self.size = data
            self.capacity = ceil_exp_2(data)
            self.storage = xp.zeros(self.capacity, dtype=xp.uint32)
            if fill:
                self.storage[:data] = fill
        else:
            if not hasattr(data, '__array_namespace__'):
                data = xp.asarray(list(data), dtype=xp.uint32)
            self.size = data.shape[0]
            self.capacity = ceil_exp_2(self.size)
            self.storage = xp.zeros(self.capacity, dtype=xp.uint32)
            self.storage[:self.size] = xp.astype(data, xp.uint32)

    @property
    def data(self):
        return self.storage[:self.size]

    def __len__(self):
        return self.size
    def __getitem__(self, idx):
        if not 0 <= idx < self.size:
            raise IndexError(idx)
        return int(self.storage[idx])
    def __setitem__(self, idx, value):
        if not 0 <= idx < self.size:
            raise IndexError(idx)
        self.storage[idx] = value
    def __iter__(self):
        for idx in range(self.size):
            yield int(self.storage[idx])
    def __eq__(a, b):
        if type(b) is not DigitArray:
            return NotImplemented
        if a.size != b.size:
            return False
        return bool(a.xp.all(a.data == b.data))
    def __repr__(self):
        return 'DigitArray(' + repr(self.tolist()) + ')'

    def tolist(self):
        return list(self)

    def back(self):
        if self.size == 0:
            raise IndexError('back of empty DigitArray')
        return int(self.storage[self.size - 1])

    def _reserve(self, capacity):
        if capacity > self.capacity:
            xp = self.xp
            capacity = ceil_exp_2(capacity)
            storage = xp.zeros(capacity, dtype=xp.uint32)
            storage[:self.size] = self.storage[:self.size]
            self.storage = storage
            self.capacity = capacity

    def resize(self, size, fill=0):
        self._reserve(size)
        if size > self.size:
            self.storage[self.size:size] = fill
        else:
            # storage past size stays zeroed
            self.storage[size:self.size] = 0
        self.size = size

    def append(self, value):
        self._reserve(self.size + 1)
        self.storage[self.size] = value
        self.size += 1

    def pop(self):
        if self.size == 0:
            raise IndexError('pop from empty DigitArray')
        self.size -= 1
        value = int(self.storage[self.size])
        self.storage[self.size] = 0
        return value

if __name__ == '__main__':
    import array_api_strict as xp

    digits = DigitArray(xp.asarray([1,2,3], dtype=xp.uint32))
    assert digits.tolist() == [1,2,3]
    digits.append(0xffffffff)
    assert digits.capacity == 4 and digits.back() == 0xffffffff
    digits.append(5)
    assert digits.capacity == 8 and len(digits) == 5
    assert digits.pop() == 5
    copy = DigitArray(digits)
    copy[0] = 7
    assert digits[0] == 1 and copy != digits
    digits.resize(2)
    assert digits.tolist() == [1,2]
    digits.resize(4, 9)
    assert digits.tolist() == [1,2,9,9]
