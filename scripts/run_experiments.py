#!/usr/bin/env python3
"""
Run cutoff sweep experiments for Quadtree Image Codec evaluation.

Generates metrics.json plus preview, decoded and error map images.
"""

import sys
import os
import json
import argparse
from datetime import datetime

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import numpy as np

from qtcodec.codec import ImageCompressor, ImageDecoder
from qtcodec.io import read_rgb_image, write_rgb_image
from qtcodec.metrics import (
    calculate_rmse,
    calculate_psnr,
    calculate_channel_psnr,
    calculate_bpp,
    calculate_compression_ratio,
    generate_error_map,
)
from PIL import Image

CUTOFF_SETTINGS = [
    (0, 0, 0),
    (10, 20, 20),
    (30, 60, 60),
    (50, 4, 100),
    (80, 160, 160),
]


def synthetic_image(rank: int = 128) -> np.ndarray:
    """Smooth gradients with a sharp-edged square, useful without sample data."""
    y, x = np.mgrid[0:rank, 0:rank]
    image = np.zeros((rank, rank, 3), dtype=np.float64)
    image[..., 0] = 255 * x / (rank - 1)
    image[..., 1] = 255 * y / (rank - 1)
    image[..., 2] = 128 + 100 * np.sin(x / 9.0) * np.cos(y / 13.0)
    q = rank // 4
    image[q:2 * q, q:2 * q] = (240, 240, 30)
    return np.clip(np.round(image), 0, 255).astype(np.uint8)


def run_experiment(image: np.ndarray, cutoffs, compressor, decoder):
    """Run encode/decode experiment at one cutoff triple."""
    compressed = compressor.encode(cutoffs)
    recovered = decoder.decode(compressed)
    preview = compressor.to_image(cutoffs)

    rmse = calculate_rmse(image, recovered)
    psnr = calculate_psnr(image, recovered)
    bpp = calculate_bpp(len(compressed), image.shape)
    cr = calculate_compression_ratio(image.nbytes, len(compressed))

    error_map = generate_error_map(image, recovered)

    return {
        'cutoffs': list(cutoffs),
        'rmse': round(rmse, 4),
        'psnr': round(psnr, 2),
        'channel_psnr': [round(p, 2) for p in calculate_channel_psnr(image, recovered)],
        'preview_psnr': round(calculate_psnr(image, preview), 2),
        'bpp': round(bpp, 4),
        'compression_ratio': round(cr, 2),
        'payload_bytes': compressor.compressed_size(cutoffs),
        'compressed_bytes': len(compressed),
        'original_bytes': image.nbytes,
        'channels': compressor.channel_sizes(cutoffs),
        'max_error': int(error_map.max()),
        'mean_error': round(float(error_map.mean()), 2),
    }, recovered, preview, error_map


def main():
    """Run all experiments."""
    parser = argparse.ArgumentParser(description='Cutoff sweep for the quadtree codec')
    parser.add_argument('--input', '-i', help='Square power-of-two image (synthetic if omitted)')
    parser.add_argument('--results', '-r', default='results', help='Results directory')
    args = parser.parse_args()

    print("=" * 60)
    print("QUADTREE IMAGE CODEC - EXPERIMENT RUNNER")
    print("=" * 60)

    results_dir = args.results
    images_dir = os.path.join(results_dir, "images")
    os.makedirs(images_dir, exist_ok=True)

    if args.input:
        print(f"\nLoading image: {args.input}")
        image = read_rgb_image(args.input)
        source = args.input
    else:
        print("\nNo input given, using synthetic 128x128 image")
        image = synthetic_image(128)
        source = "synthetic"

    print(f"  Shape: {image.shape}")
    print(f"  Size: {image.nbytes:,} bytes")

    write_rgb_image(image, os.path.join(images_dir, "original.png"))
    print(f"  Saved: {images_dir}/original.png")

    compressor = ImageCompressor(image)
    decoder = ImageDecoder()

    print("\n" + "=" * 60)
    print("RATE-DISTORTION EXPERIMENTS")
    print("=" * 60)

    all_results = []

    for cutoffs in CUTOFF_SETTINGS:
        tag = "c" + "_".join(str(c) for c in cutoffs)
        print(f"\n--- Cutoffs = {cutoffs} ---")

        result, recovered, preview, error_map = run_experiment(
            image, cutoffs, compressor, decoder
        )
        all_results.append(result)

        print(f"  RMSE:  {result['rmse']:.4f}")
        print(f"  PSNR:  {result['psnr']:.2f} dB (preview {result['preview_psnr']:.2f} dB)")
        print(f"  BPP:   {result['bpp']:.4f}")
        print(f"  CR:    {result['compression_ratio']:.2f}x")
        print(f"  Size:  {result['compressed_bytes']:,} bytes")
        print(f"  Max Error: {result['max_error']}")

        write_rgb_image(recovered, os.path.join(images_dir, f"decoded_{tag}.png"))
        write_rgb_image(preview, os.path.join(images_dir, f"preview_{tag}.png"))
        Image.fromarray(error_map).save(os.path.join(images_dir, f"error_map_{tag}.png"))
        print(f"  Saved: decoded_{tag}.png, preview_{tag}.png, error_map_{tag}.png")

    output = {
        "experiment_date": datetime.now().isoformat(),
        "source": source,
        "image_info": {
            "shape": list(image.shape),
            "dtype": str(image.dtype),
            "original_bytes": int(image.nbytes),
        },
        "codec_info": {
            "structure": "Region quadtree, 2x2 leaves",
            "color_space": "YCbCr (fixed linear transform)",
            "preview": "Bilinear corner interpolation of collapsed regions",
            "stored": "Structure bits + leaf data, collapsed regions as corner average",
        },
        "rate_distortion_results": all_results,
    }

    output_path = os.path.join(results_dir, "metrics.json")
    with open(output_path, 'w', encoding='utf-8') as f:
        json.dump(output, f, indent=2, ensure_ascii=False)

    print("\n" + "=" * 60)
    print("EXPERIMENT COMPLETE")
    print("=" * 60)
    print(f"\nResults saved to: {output_path}")
    print(f"Images saved to: {images_dir}/")

    print("\n" + "-" * 60)
    print("SUMMARY TABLE")
    print("-" * 60)
    print(f"{'Cutoffs':>14} {'RMSE':>10} {'PSNR (dB)':>12} {'BPP':>10} {'CR':>10}")
    print("-" * 60)
    for r in all_results:
        label = ",".join(str(c) for c in r['cutoffs'])
        print(f"{label:>14} {r['rmse']:>10.4f} {r['psnr']:>12.2f} "
              f"{r['bpp']:>10.4f} {r['compression_ratio']:>9.2f}x")
    print("-" * 60)

    return 0


if __name__ == "__main__":
    sys.exit(main())
