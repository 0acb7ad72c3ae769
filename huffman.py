import argparse
import heapq
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional

ALPHABET_SIZE = 256
SENTINEL_SYMBOL = ALPHABET_SIZE # synthetic leaf symbol, never a real byte


# Errors

class HuffmanError(Exception):
    """Base class for every codec failure."""

class EmptyInputError(HuffmanError, ValueError):
    """No symbol has a non-zero frequency, so there is no tree to build."""

class InvalidBitError(HuffmanError, ValueError):
    """The bit sequence holds something other than '0' / '1', or a code word this tree never emits."""

class TruncatedInputError(HuffmanError, ValueError):
    """The bit sequence ends in the middle of a code word."""

class UnknownSymbolError(HuffmanError, LookupError):
    """The code table has no code word for an input symbol."""


# Data model

class HuffmanNode: # Node for Huffman tree
    def __init__(self, symbol, frequency, left=None, right=None, order=0):
        if (left is None) != (right is None):
            raise ValueError("a node needs both children or neither")
        if left is not None and frequency != left.frequency + right.frequency:
            raise ValueError("internal node frequency must equal the sum of its children")
        self.symbol = symbol    # byte, SENTINEL_SYMBOL or None for internal nodes
        self.frequency = frequency
        self.left = left
        self.right = right
        self.order = order      # creation sequence of internal nodes, 0 for leaves

    @property
    def tie_break(self) -> int:
        # internal nodes rank as symbol 0, ahead of any equal-weight leaf above 0
        return 0 if self.symbol is None else self.symbol

    def is_leaf(self) -> bool:
        return self.left is None and self.right is None

    def __lt__(self, other):
        # frequency, then symbol, then creation order, so equal weights always merge in the same order
        return (self.frequency, self.tie_break, self.order) < (other.frequency, other.tie_break, other.order)

    def __eq__(self, other):
        if not isinstance(other, HuffmanNode):
            return NotImplemented
        return (
            self.symbol == other.symbol
            and self.frequency == other.frequency
            and self.left == other.left
            and self.right == other.right
        )

    def __hash__(self):
        # trees are never mutated after construction
        return hash((self.symbol, self.frequency, self.left, self.right))

    def __repr__(self):
        if self.is_leaf():
            return f"HuffmanNode(symbol={self.symbol!r}, frequency={self.frequency})"
        return f"HuffmanNode(frequency={self.frequency}, left={self.left!r}, right={self.right!r})"

    def leaves(self) -> List["HuffmanNode"]:
        if self.is_leaf():
            return [self]
        return self.left.leaves() + self.right.leaves()


@dataclass(frozen=True)
class EncodedMessage:
    """Bit string produced by :func:`compress` together with the tree needed to read it."""
    bits: str
    root: HuffmanNode

    @property
    def bit_length(self) -> int:
        return len(self.bits)


# Frequency counter

def build_frequency_table(data: Iterable[int]) -> List[int]: # data: bytes or any iterable of ints in 0..255
    table = [0] * ALPHABET_SIZE
    for symbol in data:
        if not 0 <= symbol < ALPHABET_SIZE:
            raise ValueError(f"symbol {symbol!r} is outside 0..{ALPHABET_SIZE - 1}")
        table[symbol] += 1
    return table


# Tree builder

def build_huffman_tree(frequency_table) -> HuffmanNode: # frequency_table: list indexed by symbol, or dict of symbol -> frequency
    if isinstance(frequency_table, Mapping):
        items = frequency_table.items()
    else:
        items = enumerate(frequency_table)

    priority_queue = []
    for symbol, frequency in items:
        if not 0 <= symbol < ALPHABET_SIZE:
            raise ValueError(f"symbol {symbol!r} is outside 0..{ALPHABET_SIZE - 1}")
        if frequency < 0:
            raise ValueError(f"negative frequency {frequency} for symbol {symbol}")
        if frequency > 0:
            priority_queue.append(HuffmanNode(symbol, frequency))

    if not priority_queue:
        raise EmptyInputError("cannot build a Huffman tree without any symbols")
    if len(priority_queue) == 1:
        # a lone leaf would get a zero-length code, so pair it with a sentinel
        priority_queue.append(HuffmanNode(SENTINEL_SYMBOL, 1))

    heapq.heapify(priority_queue)

    # Build the tree
    merged = 0
    while len(priority_queue) > 1:
        left = heapq.heappop(priority_queue)
        right = heapq.heappop(priority_queue)
        merged += 1
        heapq.heappush(priority_queue, HuffmanNode(None, left.frequency + right.frequency, left, right, order=merged))

    return priority_queue[0] # root of the tree


# Code table builder

def generate_huffman_codes(root: HuffmanNode) -> Dict[int, str]: # root: root of the Huffman tree
    if root.is_leaf():
        raise ValueError("root must be an internal node; a single leaf has no code word")

    codes = {}
    def generate_codes_helper(node, current_code): # recursive helper function to traverse the tree and generate codes
        # Leaf node -> assign code
        if node.is_leaf():
            codes[node.symbol] = current_code
            return

        generate_codes_helper(node.left, current_code + '0')
        generate_codes_helper(node.right, current_code + '1')

    generate_codes_helper(root, '')
    return codes # mapping of symbols to their Huffman codes


# Encoder / decoder

def huffman_encode(data: Iterable[int], code_map: Dict[int, str]) -> str: # data: input bytes to encode, code_map: dict of symbol -> Huffman code
    parts = []
    for index, byte in enumerate(data):
        try:
            parts.append(code_map[byte])
        except KeyError:
            raise UnknownSymbolError(f"no code word for symbol {byte!r} at offset {index}") from None
    return ''.join(parts)

def huffman_decode(bitstring: str, root: HuffmanNode) -> bytes: # bitstring: the encoded string of '0's and '1's, root: root of the Huffman tree
    decoded_bytes = bytearray()
    current_node = root
    for position, bit in enumerate(bitstring):
        if bit == '0':
            current_node = current_node.left
        elif bit == '1':
            current_node = current_node.right
        else:
            raise InvalidBitError(f"invalid bit {bit!r} at position {position}")

        if current_node.is_leaf(): # reached a leaf
            if current_node.symbol == SENTINEL_SYMBOL:
                raise InvalidBitError(f"code word ending at position {position} does not belong to any input symbol")
            decoded_bytes.append(current_node.symbol)
            current_node = root # reset to the root for the next symbol

    if current_node is not root:
        raise TruncatedInputError(f"bit sequence of length {len(bitstring)} ends inside a code word")
    return bytes(decoded_bytes)


# Public API

def compress(data: bytes) -> EncodedMessage:
    frequency_table = build_frequency_table(data)
    root = build_huffman_tree(frequency_table)
    code_map = generate_huffman_codes(root)
    return EncodedMessage(huffman_encode(data, code_map), root)

def decompress(message: EncodedMessage) -> bytes:
    return huffman_decode(message.bits, message.root)


def main(argv: Optional[List[str]] = None) -> int:
    ap = argparse.ArgumentParser(description="Encode a string with Huffman coding and decode it again")
    ap.add_argument("text", nargs="?", default="hello world!", help="Text to encode (UTF-8)")
    args = ap.parse_args(argv)

    data = args.text.encode("utf-8")
    try:
        result = compress(data)
    except EmptyInputError as exc:
        ap.error(str(exc))
    print(f"encoded message : {result.bits}")
    print(f"encoded bits    : {result.bit_length} (input was {len(data) * 8})")
    print(f"unencoded message = {decompress(result).decode('utf-8')}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
