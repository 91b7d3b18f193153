#!/usr/bin/env python3
"""
Quadtree Image Encoder CLI

Usage:
    python encode.py --input <path> --output <path> --cutoffs <luma,cb,cr>

Example:
    python encode.py --input samples/lena.png --output lena.qtc --cutoffs 50,4,100
"""

import argparse
import sys
import os
import time

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from qtcodec.constants import DEFAULT_CUTOFFS
from qtcodec.io import read_rgb_image, write_rgb_image
from qtcodec.codec import ImageCompressor
from qtcodec.metrics import calculate_bpp, calculate_compression_ratio, calculate_psnr


def parse_cutoffs(text: str):
    """Parse 'L,CB,CR' into a cutoff triple."""
    parts = text.split(',')
    if len(parts) != 3:
        raise argparse.ArgumentTypeError(f"Expected three comma-separated cutoffs, got '{text}'")
    try:
        cutoffs = tuple(int(p) for p in parts)
    except ValueError:
        raise argparse.ArgumentTypeError(f"Cutoffs must be integers, got '{text}'")
    for c in cutoffs:
        if not 0 <= c <= 255:
            raise argparse.ArgumentTypeError(f"Cutoffs must be 0-255, got {c}")
    return cutoffs


def main():
    parser = argparse.ArgumentParser(
        description='Quadtree Image Encoder - Adaptive lossy compression for square images',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Encode with default cutoffs
  python encode.py --input samples/lena.png --output lena.qtc

  # Encode with custom cutoffs and write the interpolated preview
  python encode.py --input samples/lena.png --output lena.qtc --cutoffs 30,8,8 \\
      --preview preview.png --verbose
        """
    )

    # Required arguments
    parser.add_argument('--input', '-i', required=True,
                        help='Input image path (.png, .jpg, ... or .npy)')
    parser.add_argument('--output', '-o', required=True,
                        help='Output compressed file path (.qtc)')

    # Optional arguments
    default = ','.join(str(c) for c in DEFAULT_CUTOFFS)
    parser.add_argument('--cutoffs', '-c', type=parse_cutoffs, default=DEFAULT_CUTOFFS,
                        help=f'Luma, Cb and Cr cutoffs 0-255 (default: {default})')
    parser.add_argument('--preview', '-p',
                        help='Also write the interpolated reconstruction to this path')
    parser.add_argument('--parallel', action='store_true',
                        help='Build the three channel trees in worker processes')
    parser.add_argument('--verbose', '-v', action='store_true',
                        help='Verbose output')

    args = parser.parse_args()

    # Check input file exists
    if not os.path.exists(args.input):
        print(f"Error: Input file not found: {args.input}", file=sys.stderr)
        sys.exit(1)

    try:
        if args.verbose:
            print(f"Reading input: {args.input}")

        start_time = time.time()

        image = read_rgb_image(args.input)

        if args.verbose:
            print(f"  Shape: {image.shape}")
            print(f"  Range: [{image.min()}, {image.max()}]")
            print("Building channel trees...")

        compressor = ImageCompressor(image, parallel=args.parallel)

        if args.verbose:
            print(f"Encoding with cutoffs={args.cutoffs}...")

        compressed = compressor.encode(args.cutoffs)

        with open(args.output, 'wb') as f:
            f.write(compressed)

        elapsed = time.time() - start_time

        original_size = image.nbytes
        compressed_size = len(compressed)
        bpp = calculate_bpp(compressed_size, image.shape)
        cr = calculate_compression_ratio(original_size, compressed_size)

        if args.preview:
            preview = compressor.to_image(args.cutoffs)
            write_rgb_image(preview, args.preview)

        if args.verbose:
            print(f"\nResults:")
            print(f"  Original size:   {original_size:,} bytes")
            print(f"  Compressed size: {compressed_size:,} bytes")
            for name, info in compressor.channel_sizes(args.cutoffs).items():
                print(f"    {name:>4}: {info['structure_bytes']:,} structure "
                      f"+ {info['leaf_bytes']:,} leaf bytes")
            print(f"  Compression ratio: {cr:.2f}x")
            print(f"  Bits per pixel: {bpp:.3f}")
            if args.preview:
                print(f"  Preview PSNR: {calculate_psnr(image, preview):.2f} dB")
                print(f"  Preview written to: {args.preview}")
            print(f"  Encoding time: {elapsed:.2f}s")
            print(f"\nOutput written to: {args.output}")
        else:
            print(f"Encoded: {args.input} -> {args.output} "
                  f"({cr:.1f}x compression, {bpp:.3f} bpp)")

    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == '__main__':
    main()
