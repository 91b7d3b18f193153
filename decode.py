#!/usr/bin/env python3
"""
Quadtree Image Decoder CLI

Reads a .qtc container, walks the three channel quadtrees it stores and
writes the reconstructed RGB image. Collapsed regions come back flat at
their stored corner average.

Usage:
    python decode.py --input <path> --output <path>

Example:
    python decode.py --input lena.qtc --output recovered.png
"""

import argparse
import sys
import os
import time

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from qtcodec.io import write_rgb_image
from qtcodec.codec import ImageDecoder
from qtcodec.metrics import calculate_bpp


def describe_container(decoder: ImageDecoder, header: dict, payload: bytes) -> None:
    """Print the header fields and the per-channel stream layout."""
    rank = header['rank']
    luma, cb, cr = header['cutoffs']
    print(f"  Rank: {rank} ({rank}x{rank} pixels)")
    print(f"  Cutoffs: luma={luma}, cb={cb}, cr={cr}")
    print(f"  Payload: {len(payload):,} bytes "
          f"({calculate_bpp(len(payload), (rank, rank, 3)):.3f} bpp)")
    for name, info in decoder.channel_layout(payload, rank).items():
        print(f"    {name:>4}: {info['structure_bytes']:,} structure "
              f"+ {info['leaf_bytes']:,} leaf bytes, {info['regions']:,} regions")


def main():
    parser = argparse.ArgumentParser(
        description='Quadtree Image Decoder - rebuild an RGB image from a .qtc container',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
The rank and the luma/cb/cr cutoffs are read from the container header;
no codec settings are needed on the command line.

Examples:
  # Decode to PNG
  python decode.py --input lena.qtc --output recovered.png

  # Show the header and per-channel stream sizes while decoding
  python decode.py --input lena.qtc --output recovered.npy --format npy --verbose
        """
    )

    parser.add_argument('--input', '-i', required=True,
                        help='Container written by encode.py (.qtc)')
    parser.add_argument('--output', '-o', required=True,
                        help='Reconstructed image path (.png, .bmp or .npy)')
    parser.add_argument('--format', '-f', choices=['png', 'bmp', 'npy'],
                        help='Output format (default: from extension)')
    parser.add_argument('--verbose', '-v', action='store_true',
                        help='Print the header and per-channel structure/leaf-data sizes')

    args = parser.parse_args()

    if not os.path.exists(args.input):
        print(f"Error: Input file not found: {args.input}", file=sys.stderr)
        sys.exit(1)

    try:
        start_time = time.time()

        with open(args.input, 'rb') as f:
            compressed = f.read()

        decoder = ImageDecoder()
        header, payload = decoder.read_container(compressed)

        if args.verbose:
            print(f"Container: {args.input} ({len(compressed):,} bytes, CRC ok)")
            describe_container(decoder, header, payload)

        image = decoder.decode_payload(payload, header['rank'], header['cutoffs'])
        write_rgb_image(image, args.output, format=args.format)

        elapsed = time.time() - start_time

        if args.verbose:
            print(f"  Decoding time: {elapsed:.2f}s")
            print(f"\nOutput written to: {args.output}")
        else:
            print(f"Decoded: {args.input} -> {args.output} "
                  f"({header['rank']}x{header['rank']}, cutoffs {header['cutoffs']})")

    except ValueError as e:
        print(f"Error: Invalid compressed file - {e}", file=sys.stderr)
        sys.exit(1)
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == '__main__':
    main()
