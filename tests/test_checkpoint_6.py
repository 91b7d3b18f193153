"""Checkpoint 6: Image I/O, Metrics and CLI Verification."""

import sys
import os
import subprocess
import tempfile

# Add parent directory to path
PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.insert(0, PROJECT_ROOT)

import numpy as np
import pytest
from PIL import Image
from qtcodec.errors import DecodeFailure
from qtcodec.io import read_rgb_image, write_rgb_image, get_image_info
from qtcodec.metrics import (
    calculate_rmse, calculate_psnr, calculate_channel_psnr, calculate_bpp,
    calculate_compression_ratio, generate_error_map,
)


def test_image_roundtrip():
    """Test PNG and NPY read/write are lossless."""
    print("=" * 60)
    print("Test 1: Image Read/Write Round-Trip")
    print("=" * 60)

    rng = np.random.default_rng(8)
    image = rng.integers(0, 256, size=(16, 16, 3), dtype=np.uint8)

    with tempfile.TemporaryDirectory() as tmp:
        for name in ("img.png", "img.npy", "img.bmp"):
            path = os.path.join(tmp, name)
            write_rgb_image(image, path)
            assert np.array_equal(read_rgb_image(path), image), f"{name} not lossless"
            print(f"   ✓ {name} lossless")

        info = get_image_info(os.path.join(tmp, "img.png"))
        assert info['width'] == 16 and info['height'] == 16

        # Greyscale files are expanded to RGB
        grey_path = os.path.join(tmp, "grey.png")
        Image.fromarray(np.full((8, 8), 77, dtype=np.uint8)).save(grey_path)
        grey = read_rgb_image(grey_path)
        assert grey.shape == (8, 8, 3) and np.all(grey == 77)
        print("   ✓ Greyscale converted to RGB")

        # Missing extension defaults to PNG
        write_rgb_image(image, os.path.join(tmp, "noext"))
        assert os.path.exists(os.path.join(tmp, "noext.png"))

    with pytest.raises(ValueError):
        write_rgb_image(np.zeros((4, 4)), "unused.png")

    print("✅ Image round-trip test passed")


def test_decode_failure():
    """Test loader errors surface as DecodeFailure."""
    print("\n" + "=" * 60)
    print("Test 2: Decode Failure")
    print("=" * 60)

    with tempfile.TemporaryDirectory() as tmp:
        with pytest.raises(DecodeFailure):
            read_rgb_image(os.path.join(tmp, "missing.png"))

        junk = os.path.join(tmp, "junk.png")
        with open(junk, 'wb') as f:
            f.write(b"not an image at all")
        with pytest.raises(DecodeFailure) as excinfo:
            read_rgb_image(junk)
        assert excinfo.value.__cause__ is not None
        print("   ✓ Corrupt file raises DecodeFailure chained to the cause")

        flat = os.path.join(tmp, "flat.npy")
        np.save(flat, np.zeros((4, 4)))
        with pytest.raises(DecodeFailure):
            read_rgb_image(flat)
        print("   ✓ Non-RGB array rejected")

    print("✅ Decode failure test passed")


def test_metrics():
    """Test metric functions."""
    print("\n" + "=" * 60)
    print("Test 3: Metrics")
    print("=" * 60)

    original = np.full((8, 8, 3), 100, dtype=np.uint8)
    reconstructed = original.copy()
    reconstructed[0, 0, 0] = 110

    assert calculate_psnr(original, original) == float('inf')
    assert calculate_rmse(original, original) == 0.0

    mse = 100 / original.size
    assert abs(calculate_rmse(original, reconstructed) - np.sqrt(mse)) < 1e-9
    assert abs(calculate_psnr(original, reconstructed) - 10 * np.log10(255 ** 2 / mse)) < 1e-9
    channel = calculate_channel_psnr(original, reconstructed)
    assert channel[1] == float('inf') and channel[0] < float('inf')
    print(f"   ✓ RMSE / PSNR: {calculate_psnr(original, reconstructed):.2f} dB")

    assert calculate_bpp(24, (8, 8, 3)) == 3.0
    assert calculate_compression_ratio(192, 24) == 8.0
    assert calculate_compression_ratio(192, 0) == float('inf')
    print("   ✓ BPP and compression ratio")

    error_map = generate_error_map(original, reconstructed)
    assert error_map.shape == (8, 8)
    assert error_map.dtype == np.uint8
    assert error_map[0, 0] == 10 and error_map.sum() == 10
    print("   ✓ Error map takes the worst channel")

    print("✅ Metrics test passed")


def test_cli_roundtrip():
    """Test encode.py and decode.py end to end."""
    print("\n" + "=" * 60)
    print("Test 4: CLI Round-Trip")
    print("=" * 60)

    y, x = np.mgrid[0:32, 0:32]
    image = np.stack([x * 8, y * 8, np.full((32, 32), 60)], axis=-1).astype(np.uint8)

    with tempfile.TemporaryDirectory() as tmp:
        src = os.path.join(tmp, "src.png")
        qtc = os.path.join(tmp, "out.qtc")
        preview = os.path.join(tmp, "preview.png")
        recovered = os.path.join(tmp, "recovered.png")
        write_rgb_image(image, src)

        result = subprocess.run(
            [sys.executable, os.path.join(PROJECT_ROOT, "encode.py"),
             "-i", src, "-o", qtc, "--cutoffs", "0,0,0", "--preview", preview, "-v"],
            capture_output=True, text=True)
        assert result.returncode == 0, result.stderr
        assert os.path.exists(qtc) and os.path.exists(preview)
        print("   ✓ encode.py wrote container and preview")

        result = subprocess.run(
            [sys.executable, os.path.join(PROJECT_ROOT, "decode.py"),
             "-i", qtc, "-o", recovered],
            capture_output=True, text=True)
        assert result.returncode == 0, result.stderr

        decoded = read_rgb_image(recovered)
        assert decoded.shape == image.shape
        assert np.array_equal(decoded, read_rgb_image(preview))
        print("   ✓ decode.py output matches the cutoff-0 preview")

        result = subprocess.run(
            [sys.executable, os.path.join(PROJECT_ROOT, "decode.py"),
             "-i", qtc, "-o", recovered, "-v"],
            capture_output=True, text=True)
        assert result.returncode == 0, result.stderr
        assert "Rank: 32" in result.stdout
        assert "Cutoffs: luma=0, cb=0, cr=0" in result.stdout
        for name in ("luma:", "cb:", "cr:"):
            assert name in result.stdout
        print("   ✓ Verbose decode reports header and per-channel streams")

        bad = os.path.join(tmp, "bad.png")
        write_rgb_image(np.zeros((12, 12, 3), dtype=np.uint8), bad)
        result = subprocess.run(
            [sys.executable, os.path.join(PROJECT_ROOT, "encode.py"),
             "-i", bad, "-o", qtc],
            capture_output=True, text=True)
        assert result.returncode == 1
        assert "power of two" in result.stderr
        print("   ✓ Non-power-of-two input fails with exit code 1")

        result = subprocess.run(
            [sys.executable, os.path.join(PROJECT_ROOT, "encode.py"),
             "-i", src, "-o", qtc, "--cutoffs", "1,2"],
            capture_output=True, text=True)
        assert result.returncode == 2
        print("   ✓ Malformed cutoffs rejected by argparse")

    print("✅ CLI round-trip test passed")


def main():
    """Run all Checkpoint 6 tests."""
    print("\n" + "=" * 60)
    print("CHECKPOINT 6: I/O, METRICS AND CLI")
    print("=" * 60 + "\n")

    tests = [
        ("Image Round-Trip", test_image_roundtrip),
        ("Decode Failure", test_decode_failure),
        ("Metrics", test_metrics),
        ("CLI Round-Trip", test_cli_roundtrip),
    ]

    results = []
    for name, test in tests:
        try:
            test()
            results.append((name, True))
        except AssertionError as e:
            print(f"❌ {name} failed: {e}")
            results.append((name, False))

    print("\n" + "=" * 60)
    print("CHECKPOINT 6 SUMMARY")
    print("=" * 60)

    all_passed = True
    for name, passed in results:
        status = "✅ PASS" if passed else "❌ FAIL"
        print(f"   {name}: {status}")
        all_passed = all_passed and passed

    return 0 if all_passed else 1


if __name__ == "__main__":
    sys.exit(main())
