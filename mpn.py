# NOTE: DIGITS are the limbs of a magnitude, least significant first.
#
# these routines work in place on any digit container with the DigitArray
# interface: len, indexing by int returning int, append, pop, back, xp.
# intermediate values are python ints, so a product of two digits plus
# carries fits without the 64-bit casts a fixed-width implementation needs.

WANT_ASSERT = True
DIGIT_BITS = 32
BASE = 1 << DIGIT_BITS
DIGIT_MASK = BASE - 1
DIGIT_MAX = DIGIT_MASK

class PreconditionError(RuntimeError):
    pass

if WANT_ASSERT:
    def ASSERT(expr, what='pre-condition is not followed'):
        if not expr:
            raise PreconditionError(what)
else:
    def ASSERT(expr, what=None):
        pass

def low_bits(a):
    return a & DIGIT_MASK

def high_bits(a):
    return (a >> DIGIT_BITS) & DIGIT_MASK

def get_kth(p, k):
    return p[k] if k < len(p) else 0

def fill_back(p, n, value):
    for _ in range(n):
        p.append(value)

def NORMALIZE(p):
    while len(p) > 1 and p.back() == 0:
        p.pop()

def is_zero(p):
    return len(p) == 1 and p[0] == 0

def count(p):
    return sum(p[i].bit_count() for i in range(len(p)))

def clear_log2(p):
    '''Exponent of p, which must be a power of two.'''
    skipped = 0
    for i in range(len(p)):
        digit = p[i]
        if digit.bit_count() == 1:
            return skipped + digit.bit_length() - 1
        if digit != 0:
            break
        skipped += DIGIT_BITS
    raise PreconditionError('clear_log2 of a value that is not a power of two')

def cmp(p, q):
    if len(p) != len(q):
        return -1 if len(p) < len(q) else 1
    for i in range(len(p) - 1, -1, -1):
        a, b = p[i], q[i]
        if a != b:
            return -1 if a < b else 1
    return 0

def com(p, n):
    ASSERT(n <= len(p))
    for i in range(n):
        p[i] = p[i] ^ DIGIT_MASK

def LOGOPS_N(rp, up, vp, n, operation):
    ASSERT(n <= len(rp) and n <= len(up) and n <= len(vp))
    for i in range(n):
        rp[i] = operation(up[i], vp[i]) & DIGIT_MASK

def add_n(p, q):
    # p += q, p grows to fit the carry
    if len(q) > len(p):
        fill_back(p, len(q) - len(p), 0)
    carry = 0
    for i in range(len(p)):
        s = p[i] + get_kth(q, i) + carry
        p[i] = low_bits(s)
        carry = high_bits(s)
    if carry:
        p.append(carry)

def sub_n(p, q):
    # p -= q for p >= q
    ASSERT(cmp(p, q) >= 0, 'sub_n with a larger subtrahend')
    borrow = 0
    i = 0
    while i < len(q) or borrow:
        d = p[i] - get_kth(q, i) - borrow
        borrow = d < 0
        p[i] = d + BASE if borrow else d
        i += 1
    NORMALIZE(p)

def incr_u(p, incr):
    ASSERT(incr <= DIGIT_MAX)
    carry = incr
    i = 0
    while carry:
        if i == len(p):
            p.append(carry)
            break
        s = p[i] + carry
        p[i] = low_bits(s)
        carry = high_bits(s)
        i += 1

def decr_u(p, decr):
    ASSERT(decr <= DIGIT_MAX)
    borrow = decr
    i = 0
    while borrow:
        ASSERT(i < len(p), 'decr_u below zero')
        d = p[i] - borrow
        borrow = 1 if d < 0 else 0
        p[i] = d + BASE if borrow else d
        i += 1
    NORMALIZE(p)

def mul(p, q):
    # grade-school product into a new container of p's type
    rp = type(p)(len(p) + len(q), 0, xp=p.xp)
    for i in range(len(p)):
        u = p[i]
        if u == 0:
            continue
        carry = 0
        j = 0
        while j < len(q) or carry:
            t = u * get_kth(q, j) + carry + rp[i + j]
            rp[i + j] = low_bits(t)
            carry = t >> DIGIT_BITS
            j += 1
    NORMALIZE(rp)
    return rp

def mul_1(p, k):
    ASSERT(k <= DIGIT_MAX)
    carry = 0
    for i in range(len(p)):
        t = p[i] * k + carry
        p[i] = low_bits(t)
        carry = t >> DIGIT_BITS
    if carry:
        p.append(carry)
    NORMALIZE(p)

def divrem_1(p, d):
    # p //= d in place, returns p % d
    if d == 0:
        raise ZeroDivisionError('division by zero')
    ASSERT(d <= DIGIT_MAX)
    carry = 0
    for i in range(len(p) - 1, -1, -1):
        dividend = p[i] + carry * BASE
        p[i] = dividend // d
        carry = dividend % d
    NORMALIZE(p)
    return carry

def lshift(p, k):
    ASSERT(k >= 0)
    n_added = k // DIGIT_BITS
    if n_added:
        size = len(p)
        fill_back(p, n_added, 0)
        for i in range(size - 1, -1, -1):
            p[i + n_added], p[i] = p[i], p[i + n_added]
    shift = k % DIGIT_BITS
    if shift:
        carry = 0
        for i in range(n_added, len(p)):
            t = (p[i] << shift) | carry
            p[i] = low_bits(t)
            carry = high_bits(t)
        if carry:
            p.append(carry)
    NORMALIZE(p)

def rshift(p, k):
    # returns True when non-zero bits were shifted out
    ASSERT(k >= 0)
    n_deleted = k // DIGIT_BITS
    lost = False
    if n_deleted >= len(p):
        lost = not is_zero(p)
        while len(p) > 1:
            p.pop()
        p[0] = 0
        return lost
    if n_deleted:
        lost = any(p[i] for i in range(n_deleted))
        for i in range(len(p) - n_deleted):
            p[i] = p[i + n_deleted]
        for _ in range(n_deleted):
            p.pop()
    shift = k % DIGIT_BITS
    if shift:
        carry = 0
        for i in range(len(p) - 1, -1, -1):
            t = p[i] << (DIGIT_BITS - shift)
            p[i] = high_bits(t) | carry
            carry = low_bits(t)
        lost = lost or carry != 0
    NORMALIZE(p)
    return lost

if __name__ == '__main__':
    import array_api_strict as xp
    from digitarray import DigitArray

    p = DigitArray([DIGIT_MAX, DIGIT_MAX], xp=xp)
    incr_u(p, 1)
    assert p.tolist() == [0, 0, 1]
    decr_u(p, 1)
    assert p.tolist() == [DIGIT_MAX, DIGIT_MAX]
    q = mul(p, p)
    assert q.tolist() == [1, 0, DIGIT_MAX - 1, DIGIT_MAX]
    assert divrem_1(q, 10) == ((BASE**2 - 1)**2) % 10
    r = DigitArray([5], xp=xp)
    lshift(r, 66)
    assert r.tolist() == [0, 0, 20]
    assert clear_log2(DigitArray([0, 4], xp=xp)) == 34
    assert rshift(r, 66) is False and r.tolist() == [5]
    assert rshift(r, 2) is True and r.tolist() == [1]
    assert rshift(r, 40) is True and r.tolist() == [0]
