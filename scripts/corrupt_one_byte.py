import sys
from pathlib import Path

HEADER_LEN = 100

def main():
    if len(sys.argv) != 2:
        print("Usage: corrupt_one_byte.py <file>")
        raise SystemExit(2)

    p = Path(sys.argv[1])
    b = bytearray(p.read_bytes())
    if len(b) < HEADER_LEN + 3:
        print("File too small to corrupt safely.")
        raise SystemExit(2)

    # Flip the marker byte of the first record right after the 100-byte header.
    # The scan keeps going, but that record is counted as invalid.
    idx = HEADER_LEN
    b[idx] ^= 0x01
    p.write_bytes(bytes(b))
    print(f"Corrupted 1 byte at offset {idx} in {p}")

if __name__ == "__main__":
    main()
