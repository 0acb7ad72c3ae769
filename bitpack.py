from typing import Tuple

import huffman as huff


def _check_pad_bits(packed: bytes, pad_bits: int) -> None:
    if not 0 <= pad_bits <= 7:
        raise ValueError(f"pad_bits must be in 0..7, got {pad_bits}")
    if pad_bits and not packed:
        raise ValueError("pad_bits given for an empty payload")


def pack_bits(bits: str) -> Tuple[bytes, int]:
    """
    Packs a string of '0'/'1' characters into bytes, most significant bit first
    Returns (packed_bytes, pad_bits) where pad_bits is number of 0 bits added at the end
    """
    out = bytearray()
    acc = 0
    acc_bits = 0

    for position, ch in enumerate(bits):
        if ch == '0':
            acc <<= 1
        elif ch == '1':
            acc = (acc << 1) | 1
        else:
            raise huff.InvalidBitError(f"invalid bit {ch!r} at position {position}")
        acc_bits += 1
        if acc_bits == 8:
            out.append(acc)
            acc = 0
            acc_bits = 0

    pad_bits = 0
    if acc_bits != 0:
        pad_bits = 8 - acc_bits
        out.append((acc << pad_bits) & 0xFF)

    return bytes(out), pad_bits


def unpack_bits(packed: bytes, pad_bits: int) -> str:
    """
    Inverse of pack_bits
    """
    _check_pad_bits(packed, pad_bits)
    bits = ''.join(format(byte, '08b') for byte in packed)
    return bits[:len(bits) - pad_bits]


def decode_packed(packed: bytes, pad_bits: int, root: huff.HuffmanNode) -> bytes:
    """
    Decode packed bits using Huffman tree, without expanding them into a bit string first
    """
    _check_pad_bits(packed, pad_bits)
    total_bits = len(packed) * 8 - pad_bits
    decoded = bytearray()
    node = root
    bit_index = 0

    for byte in packed:
        for i in range(7, -1, -1):
            if bit_index >= total_bits:
                break
            node = node.right if (byte >> i) & 1 else node.left

            # Leaf
            if node.is_leaf():
                if node.symbol == huff.SENTINEL_SYMBOL:
                    raise huff.InvalidBitError(f"code word ending at bit {bit_index} does not belong to any input symbol")
                decoded.append(node.symbol)
                node = root
            bit_index += 1

    if node is not root:
        raise huff.TruncatedInputError(f"packed stream of {total_bits} bits ends inside a code word")
    return bytes(decoded)
