"""
Galois field GF(2^8) arithmetic and the Reed-Solomon encoder used for QR
error correction codewords.

References:
- https://en.wikipedia.org/wiki/Finite_field_arithmetic
- https://en.wikiversity.org/wiki/Reed-Solomon_codes_for_coders
"""

from typing import Dict, List, Sequence


#==============================================================================
# GALOIS FIELD GF(256) ARITHMETIC
#==============================================================================

class GF256:
    """
    Galois Field GF(2^8) arithmetic for QR codes.

    Uses the primitive polynomial x^8 + x^4 + x^3 + x^2 + 1 (0x11d) with
    generator alpha = 2. Multiplication and division go through precomputed
    exponent/logarithm tables.
    """

    PRIMITIVE_POLY = 0x11d

    def __init__(self):
        self.exp_table = [0] * 512  # doubled so exponent sums need no modulo
        self.log_table = [0] * 256
        self._build_tables()

    def _build_tables(self):
        x = 1
        for i in range(255):
            self.exp_table[i] = x
            self.exp_table[i + 255] = x
            self.log_table[x] = i
            x <<= 1
            if x & 0x100:
                x ^= self.PRIMITIVE_POLY
        self.log_table[0] = -1  # log(0) is undefined

    def multiply(self, a: int, b: int) -> int:
        if a == 0 or b == 0:
            return 0
        return self.exp_table[self.log_table[a] + self.log_table[b]]

    def divide(self, a: int, b: int) -> int:
        if b == 0:
            raise ZeroDivisionError("Division by zero in GF(256)")
        if a == 0:
            return 0
        return self.exp_table[(self.log_table[a] - self.log_table[b]) % 255]

    def power(self, a: int, n: int) -> int:
        if a == 0:
            return 0 if n > 0 else 1
        return self.exp_table[(self.log_table[a] * n) % 255]

    def inverse(self, a: int) -> int:
        if a == 0:
            raise ZeroDivisionError("No inverse for 0")
        # a^(-1) = a^254 since a^255 = 1
        return self.exp_table[255 - self.log_table[a]]


# Shared read-only field instance
gf = GF256()


#==============================================================================
# POLYNOMIALS OVER GF(256)
#==============================================================================

class Polynomial:
    """
    Polynomial with coefficients in GF(256).

    Coefficients are stored in ascending order of degree:
    coeffs[i] is the coefficient of x^i.
    """

    def __init__(self, coefficients: Sequence[int], field: GF256 = None):
        self.gf = field or gf
        self.coeffs = list(coefficients)
        while len(self.coeffs) > 1 and self.coeffs[-1] == 0:
            self.coeffs.pop()

    @classmethod
    def from_codewords(cls, codewords: Sequence[int], field: GF256 = None) -> 'Polynomial':
        """Codeword streams are transmitted highest degree first."""
        return cls(list(reversed(codewords)), field)

    @property
    def degree(self) -> int:
        return len(self.coeffs) - 1

    def evaluate(self, x: int) -> int:
        """Evaluate polynomial at x using Horner's method."""
        result = 0
        for coeff in reversed(self.coeffs):
            result = self.gf.multiply(result, x) ^ coeff
        return result

    def multiply(self, other: 'Polynomial') -> 'Polynomial':
        result = [0] * (len(self.coeffs) + len(other.coeffs) - 1)
        for i, a in enumerate(self.coeffs):
            for j, b in enumerate(other.coeffs):
                result[i + j] ^= self.gf.multiply(a, b)
        return Polynomial(result, self.gf)


#==============================================================================
# REED-SOLOMON ERROR CORRECTION
#==============================================================================

class ReedSolomonEncoder:
    """Computes the EC codewords of one block by polynomial remainder."""

    def __init__(self, field: GF256 = None):
        self.gf = field or gf
        self._generator_cache: Dict[int, Polynomial] = {}

    def build_generator(self, num_ec_codewords: int) -> Polynomial:
        """
        g(x) = (x + alpha^0)(x + alpha^1)...(x + alpha^(n-1))

        In GF(256), subtraction equals addition.
        """
        generator = self._generator_cache.get(num_ec_codewords)
        if generator is not None:
            return generator

        generator = Polynomial([1], self.gf)
        for i in range(num_ec_codewords):
            generator = generator.multiply(Polynomial([self.gf.exp_table[i], 1], self.gf))

        self._generator_cache[num_ec_codewords] = generator
        return generator

    def encode(self, data: Sequence[int], num_ec_codewords: int) -> List[int]:
        """
        Encode one block of data codewords.

        Args:
            data: Data codewords (integers 0-255)
            num_ec_codewords: Number of error correction codewords to generate

        Returns:
            The error correction codewords, highest degree first
        """
        if num_ec_codewords <= 0:
            return []
        generator = self.build_generator(num_ec_codewords)
        gen_coeffs = list(reversed(generator.coeffs))  # high degree first, monic

        # Shift-register long division; only the remainder is kept
        result = list(data) + [0] * num_ec_codewords
        for i in range(len(data)):
            coeff = result[i]
            if coeff != 0:
                for j, g in enumerate(gen_coeffs):
                    result[i + j] ^= self.gf.multiply(g, coeff)

        return result[-num_ec_codewords:]

    def syndromes(self, block: Sequence[int], num_ec_codewords: int) -> List[int]:
        """
        Evaluate a received block (data + EC codewords) at each generator
        root. All zeros means the block is a valid codeword.
        """
        poly = Polynomial.from_codewords(block, self.gf)
        return [poly.evaluate(self.gf.exp_table[i]) for i in range(num_ec_codewords)]


# Shared encoder; the generator cache only ever grows with identical values
rs_encoder = ReedSolomonEncoder()
