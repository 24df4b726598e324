# representation:
#  sign flag (True is negative) and a magnitude of base 2**32 digits,
#  least significant first, in a digit container.
#  the magnitude has no high zero digits except zero itself, which is a
#  single 0 digit and never negative. every mutating operation ends in
#  _shrink_to_fit to restore this.
#
# BigInt keeps its digits in a DigitStore (inline or copy-on-write shared),
# PlainBigInt in a plain DigitArray. the arithmetic is the same.
#
# the in-place operators mutate the value and return it, the plain operators
# copy the left operand and apply the in-place form.

import logging
import operator

from digitarray import DigitArray
from digitstore import DigitStore
import mpn
from mpn import BASE, DIGIT_BITS, DIGIT_MASK

logger = logging.getLogger(__name__)

class ParseError(ValueError):
    pass

class BigInt:
    _storage = DigitStore

    def __init__(self, value=0, *, xp=None):
        if isinstance(value, BigInt):
            if type(value._digits) is self._storage:
                self._digits = self._storage(value._digits)
            else:
                self._digits = self._storage(value._digits.tolist(), xp=xp or value._digits.xp)
            self._sign = value._sign
        elif isinstance(value, str):
            self._digits = self._storage(1, 0, xp=xp)
            self._sign = False
            self._parse(value)
        else:
            try:
                value = operator.index(value)
            except TypeError:
                raise TypeError(f'cannot make {type(self).__name__} from {type(value).__name__}') from None
            self._sign = value < 0
            value = abs(value)
            digits = [value & DIGIT_MASK]
            value >>= DIGIT_BITS
            while value:
                digits.append(value & DIGIT_MASK)
                value >>= DIGIT_BITS
            self._digits = self._storage(digits, xp=xp)

    def _parse(self, text):
        if not text:
            raise ParseError('expected: integer, found: empty string')
        negative = text[0] == '-'
        body = text[1:] if negative else text
        if not body:
            raise ParseError('expected: digit, found: end of string')
        for ch in body:
            if not '0' <= ch <= '9':
                raise ParseError(f'expected: digit, found: {ch!r}')
        xp = self._digits.xp
        base = self._storage([1], xp=xp)
        for ch in reversed(body):
            digit = ord(ch) - ord('0')
            if digit:
                term = self._storage(base)
                mpn.mul_1(term, digit)
                mpn.add_n(self._digits, term)
            mpn.mul_1(base, 10)
        self._sign = negative
        self._shrink_to_fit()

    def _coerce(self, other):
        if other is self or type(other) is not type(self):
            if isinstance(other, str):
                raise TypeError(f'unsupported operand type for {type(self).__name__}: str')
            return type(self)(other, xp=self._digits.xp)
        return other

    def _assign(self, other):
        self._digits = self._storage(other._digits)
        self._sign = other._sign
        return self

    def _shrink_to_fit(self):
        mpn.NORMALIZE(self._digits)
        if mpn.is_zero(self._digits):
            self._sign = False

    def _is_zero(self):
        return mpn.is_zero(self._digits)

    @property
    def negative(self):
        return self._sign
    @property
    def digits(self):
        return tuple(self._digits)

    # additive

    def __iadd__(self, rhs):
        rhs = self._coerce(rhs)
        if self._sign and not rhs._sign:
            return self._assign(rhs - (-self))
        elif not self._sign and rhs._sign:
            return self.__isub__(-rhs)
        # same signs from here
        mpn.add_n(self._digits, rhs._digits)
        return self

    def __isub__(self, rhs):
        rhs = self._coerce(rhs)
        if self._sign and not rhs._sign:
            return self._assign(-(rhs - self))
        elif not self._sign and rhs._sign:
            return self.__iadd__(-rhs)
        elif self._sign and rhs._sign:
            return self._assign(-((-self) - (-rhs)))
        elif self < rhs:
            return self._assign(-(rhs - self))
        # self >= rhs >= 0 from here
        mpn.sub_n(self._digits, rhs._digits)
        self._shrink_to_fit()
        return self

    # multiplicative

    def __imul__(self, rhs):
        rhs = self._coerce(rhs)
        sign = self._sign ^ rhs._sign
        # a power of two times anything is a shift
        if mpn.count(self._digits) == 1:
            self._assign(rhs << mpn.clear_log2(self._digits))
        elif mpn.count(rhs._digits) == 1:
            mpn.lshift(self._digits, mpn.clear_log2(rhs._digits))
        else:
            self._digits = mpn.mul(self._digits, rhs._digits)
        self._sign = sign
        self._shrink_to_fit()
        return self

    @staticmethod
    def _short_div(a, b):
        '''Returns the quotient and remainder of a divided by one digit b.'''
        quotient = type(a)(a)
        remainder = mpn.divrem_1(quotient._digits, b)
        quotient._shrink_to_fit()
        return quotient, remainder

    @staticmethod
    def _trial(r, k, m, d):
        r3 = (r[k + m] * BASE + r[k + m - 1]) * BASE + r[k + m - 2]
        d2 = (d[m - 1] << DIGIT_BITS) + d[m - 2]
        return min(r3 // d2, BASE - 1)

    @staticmethod
    def _smaller(r, dq, k, m):
        i = m
        while i > 0 and r[i + k] == dq[i]:
            i -= 1
        return r[i + k] < dq[i]

    @staticmethod
    def _difference(r, dq, k, m):
        borrow = 0
        for i in range(m + 1):
            diff = r[i + k] - dq[i] - borrow + BASE
            r[i + k] = mpn.low_bits(diff)
            borrow = 1 - mpn.high_bits(diff)

    def _long_div(self, rhs):
        # knuth algorithm D on the magnitudes, the divisor has >= 2 digits
        n, m = len(self._digits), len(rhs._digits)
        f = BASE // (rhs._digits[m - 1] + 1)
        r = self._storage(self._digits)
        d = self._storage(rhs._digits)
        mpn.mul_1(r, f)
        mpn.mul_1(d, f)
        q = self._storage(n - m + 1, 0, xp=r.xp)
        mpn.fill_back(r, n + 2 - len(r), 0)
        for k in range(n - m, -1, -1):
            qt = self._trial(r, k, m, d)
            dq = self._storage(d)
            mpn.mul_1(dq, qt)
            mpn.fill_back(dq, m + 1 - len(dq), 0)
            if self._smaller(r, dq, k, m):
                qt -= 1
                dq = self._storage(d)
                mpn.mul_1(dq, qt)
                mpn.fill_back(dq, m + 1 - len(dq), 0)
            q[k] = qt
            self._difference(r, dq, k, m)
        return q

    def __itruediv__(self, rhs):
        rhs = self._coerce(rhs)
        if rhs._is_zero():
            raise ZeroDivisionError('division by zero')
        sign = self._sign ^ rhs._sign
        if len(self._digits) < len(rhs._digits):
            return self._assign(type(self)(0, xp=self._digits.xp))
        elif len(rhs._digits) == 1:
            logger.debug('short division of %d digits', len(self._digits))
            mpn.divrem_1(self._digits, rhs._digits[0])
        elif mpn.count(rhs._digits) == 1:
            logger.debug('division by shift of %d digits', len(self._digits))
            # truncating: the magnitude is shifted, not the signed value
            mpn.rshift(self._digits, mpn.clear_log2(rhs._digits))
        else:
            logger.debug('long division of %d by %d digits', len(self._digits), len(rhs._digits))
            self._digits = self._long_div(rhs)
        self._sign = sign
        self._shrink_to_fit()
        return self
    __ifloordiv__ = __itruediv__

    def __imod__(self, rhs):
        rhs = self._coerce(rhs)
        return self.__isub__((self / rhs) * rhs)

    # bitwise

    def _to_additional_code(self, n_digits):
        mpn.fill_back(self._digits, n_digits - len(self._digits), 0)
        if self._sign:
            self._sign = False
            mpn.com(self._digits, len(self._digits))
            mpn.incr_u(self._digits, 1)

    def _bitwise_operation(self, rhs, operation):
        rhs = self._coerce(rhs)
        ans, tmp_rhs = type(self)(self), type(self)(rhs)
        max_size = max(len(self._digits), len(rhs._digits))
        ans._to_additional_code(max_size)
        tmp_rhs._to_additional_code(max_size)
        sign = bool(operation(int(self._sign), int(rhs._sign)))
        mpn.LOGOPS_N(ans._digits, ans._digits, tmp_rhs._digits, max_size, operation)
        if sign:
            ans._sign = True
            ans._to_additional_code(max_size)
            ans._sign = True
        ans._shrink_to_fit()
        return self._assign(ans)

    def __iand__(self, rhs):
        return self._bitwise_operation(rhs, operator.and_)
    def __ior__(self, rhs):
        return self._bitwise_operation(rhs, operator.or_)
    def __ixor__(self, rhs):
        return self._bitwise_operation(rhs, operator.xor)

    # shifts

    def __ilshift__(self, rhs):
        rhs = operator.index(rhs)
        if rhs < 0:
            return self.__irshift__(-rhs)
        mpn.lshift(self._digits, rhs)
        self._shrink_to_fit()
        return self

    def __irshift__(self, rhs):
        rhs = operator.index(rhs)
        if rhs < 0:
            return self.__ilshift__(-rhs)
        lost = mpn.rshift(self._digits, rhs)
        # round toward negative infinity
        if self._sign and lost:
            mpn.incr_u(self._digits, 1)
        self._shrink_to_fit()
        return self

    # value-returning forms

    def __add__(self, rhs):
        result = type(self)(self)
        result += rhs
        return result
    def __sub__(self, rhs):
        result = type(self)(self)
        result -= rhs
        return result
    def __mul__(self, rhs):
        result = type(self)(self)
        result *= rhs
        return result
    def __truediv__(self, rhs):
        result = type(self)(self)
        result /= rhs
        return result
    __floordiv__ = __truediv__
    def __mod__(self, rhs):
        result = type(self)(self)
        result %= rhs
        return result
    def __divmod__(self, rhs):
        quotient = self / rhs
        return quotient, self - quotient * rhs
    def __and__(self, rhs):
        result = type(self)(self)
        result &= rhs
        return result
    def __or__(self, rhs):
        result = type(self)(self)
        result |= rhs
        return result
    def __xor__(self, rhs):
        result = type(self)(self)
        result ^= rhs
        return result
    def __lshift__(self, rhs):
        result = type(self)(self)
        result <<= rhs
        return result
    def __rshift__(self, rhs):
        result = type(self)(self)
        result >>= rhs
        return result

    def __radd__(self, lhs):
        return self._coerce(lhs) + self
    def __rsub__(self, lhs):
        return self._coerce(lhs) - self
    def __rmul__(self, lhs):
        return self._coerce(lhs) * self
    def __rtruediv__(self, lhs):
        return self._coerce(lhs) / self
    __rfloordiv__ = __rtruediv__
    def __rmod__(self, lhs):
        return self._coerce(lhs) % self
    def __rdivmod__(self, lhs):
        return divmod(self._coerce(lhs), self)
    def __rand__(self, lhs):
        return self._coerce(lhs) & self
    def __ror__(self, lhs):
        return self._coerce(lhs) | self
    def __rxor__(self, lhs):
        return self._coerce(lhs) ^ self

    # unary

    def __pos__(self):
        return type(self)(self)
    def __neg__(self):
        result = type(self)(self)
        if not result._is_zero():
            result._sign = not result._sign
        return result
    def __invert__(self):
        return -self - 1
    def __abs__(self):
        result = type(self)(self)
        result._sign = False
        return result

    def increment(self):
        self += 1
        return self
    def decrement(self):
        self -= 1
        return self
    def post_increment(self):
        old = type(self)(self)
        self += 1
        return old
    def post_decrement(self):
        old = type(self)(self)
        self -= 1
        return old

    # comparison

    def _cmp(a, b):
        if a._sign != b._sign:
            return -1 if a._sign else 1
        result = mpn.cmp(a._digits, b._digits)
        return -result if a._sign else result

    def _comparable(self, other):
        if isinstance(other, BigInt):
            return other
        try:
            return type(self)(operator.index(other), xp=self._digits.xp)
        except TypeError:
            return None

    def __eq__(a, b):
        b = a._comparable(b)
        if b is None:
            return NotImplemented
        return a._sign == b._sign and mpn.cmp(a._digits, b._digits) == 0
    def __ne__(a, b):
        b = a._comparable(b)
        if b is None:
            return NotImplemented
        return a._sign != b._sign or mpn.cmp(a._digits, b._digits) != 0
    def __lt__(a, b):
        b = a._comparable(b)
        if b is None:
            return NotImplemented
        return a._cmp(b) < 0
    def __gt__(a, b):
        b = a._comparable(b)
        if b is None:
            return NotImplemented
        return a._cmp(b) > 0
    def __le__(a, b):
        b = a._comparable(b)
        if b is None:
            return NotImplemented
        return a._cmp(b) <= 0
    def __ge__(a, b):
        b = a._comparable(b)
        if b is None:
            return NotImplemented
        return a._cmp(b) >= 0
    __hash__ = None

    # conversion

    def to_string(self):
        if self._is_zero():
            return '0'
        chars = []
        tmp = abs(self)
        while not tmp._is_zero():
            tmp, remainder = self._short_div(tmp, 10)
            chars.append(chr(ord('0') + remainder))
        if self._sign:
            chars.append('-')
        return ''.join(reversed(chars))

    def __str__(self):
        return self.to_string()
    def __repr__(self):
        return f"{type(self).__name__}('{self.to_string()}')"

    def __int__(self):
        accum = 0
        for digit in reversed(self.digits):
            accum <<= DIGIT_BITS
            accum += digit
        return -accum if self._sign else accum
    __index__ = __int__

    def __bool__(self):
        return not self._is_zero()

class PlainBigInt(BigInt):
    _storage = DigitArray

if __name__ == '__main__':
    import array_api_strict as xp

    for cls in (BigInt, PlainBigInt):
        a = cls('123456789123456789', xp=xp)
        assert a * cls(-2, xp=xp) == cls('-246913578246913578', xp=xp)
        q, r = divmod(cls(1000000000, xp=xp), 3)
        assert q == 333333333 and r == 1
        assert cls(-7, xp=xp) % 3 == -1
        assert cls(5, xp=xp) << 2 == 20
        assert cls(-1, xp=xp) & 1 == 1
        big = cls(1 << 200, xp=xp) + 12345
        assert int(big / cls((1 << 70) + 3, xp=xp)) == ((1 << 200) + 12345) // ((1 << 70) + 3)
        assert str(cls(-(10 ** 30), xp=xp)) == '-1' + '0' * 30
        try:
            cls('', xp=xp)
        except ParseError:
            pass
        else:
            raise AssertionError('empty string parsed')
