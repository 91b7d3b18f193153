"""Checkpoint 4: Colour Transform and Plane Utilities Verification."""

import sys
import os

# Add parent directory to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import numpy as np
import pytest
from qtcodec.errors import InvalidDimensions
from qtcodec.transform import (
    rgb_to_ycbcr, ycbcr_to_rgb, to_bytes,
    as_rgb_image, split_planes, merge_planes,
)


def test_known_colors():
    """Test the forward transform on reference colours."""
    print("=" * 60)
    print("Test 1: Reference Colours")
    print("=" * 60)

    ycbcr = rgb_to_ycbcr(np.array([[0, 0, 0], [255, 255, 255], [128, 128, 128]]))
    assert np.allclose(ycbcr[0], [0, 128, 128])
    assert np.allclose(ycbcr[1], [255, 128.255, 128], atol=0.3)
    assert np.allclose(ycbcr[2], [128, 128.128, 128], atol=0.2)
    print("   ✓ Greys map to neutral chroma")

    red = rgb_to_ycbcr(np.array([255, 0, 0]))
    assert np.allclose(red, [76.245, 84.905, 255.0])
    blue = rgb_to_ycbcr(np.array([0, 0, 255]))
    assert blue[1] == 255.0, "Cb is clamped to 255"
    print(f"   ✓ Red -> {np.round(red, 3)}, blue Cb clamped")

    print("✅ Reference colours test passed")


def test_color_roundtrip():
    """Test inverse(forward(rgb)) stays within +-1 of rgb."""
    print("\n" + "=" * 60)
    print("Test 2: Colour Round-Trip")
    print("=" * 60)

    levels = np.arange(0, 256, 5)
    r, g, b = np.meshgrid(levels, levels, levels, indexing='ij')
    rgb = np.stack([r.ravel(), g.ravel(), b.ravel()], axis=-1).astype(np.uint8)

    restored = ycbcr_to_rgb(rgb_to_ycbcr(rgb))
    assert restored.dtype == np.uint8
    diff = np.abs(restored.astype(np.int16) - rgb.astype(np.int16))
    assert diff.max() <= 1, f"Max round-trip error {diff.max()}"
    print(f"   ✓ {len(rgb):,} triples, max error {diff.max()}")

    rng = np.random.default_rng(5)
    rgb = rng.integers(0, 256, size=(10000, 3))
    diff = np.abs(ycbcr_to_rgb(rgb_to_ycbcr(rgb)).astype(np.int16) - rgb)
    assert diff.max() <= 1
    print("   ✓ 10,000 random triples within +-1")

    print("✅ Colour round-trip test passed")


def test_byte_clamping():
    """Test rounding and clamping to uint8."""
    print("\n" + "=" * 60)
    print("Test 3: Byte Clamping")
    print("=" * 60)

    values = np.array([-20.0, 0.4, 0.5, 1.5, 254.6, 300.0])
    assert to_bytes(values).tolist() == [0, 0, 0, 2, 255, 255]
    assert to_bytes(values).dtype == np.uint8

    # R = 433, G = 120.634, B = 480
    out = ycbcr_to_rgb(np.array([255.0, 255.0, 255.0]))
    assert out.tolist() == [255, 121, 255]
    # R = -179.456, G = 135.424, B = -226.816
    out = ycbcr_to_rgb(np.array([0.0, 0.0, 0.0]))
    assert out.tolist() == [0, 135, 0]
    print("   ✓ Inverse output clamped to [0, 255]")

    with pytest.raises(ValueError):
        rgb_to_ycbcr(np.zeros((4, 4, 4)))
    print("✅ Byte clamping test passed")


def test_planes():
    """Test image normalisation and plane split/merge."""
    print("\n" + "=" * 60)
    print("Test 4: Planes")
    print("=" * 60)

    rng = np.random.default_rng(6)
    image = rng.integers(0, 256, size=(8, 8, 3), dtype=np.uint8)

    normalised, rank = as_rgb_image(image)
    assert rank == 8
    assert np.array_equal(normalised, image)

    flat = [tuple(p) for p in image.reshape(-1, 3)]
    from_flat, rank = as_rgb_image(flat, 8)
    assert rank == 8 and np.array_equal(from_flat, image)
    from_flat, rank = as_rgb_image(flat)
    assert rank == 8
    print("   ✓ 3D arrays and flat triples accepted")

    planes = split_planes(image)
    assert len(planes) == 3
    assert all(p.shape == (64,) for p in planes)
    assert np.array_equal(planes[1], image[..., 1].ravel())
    merged = merge_planes([p.reshape(8, 8) for p in planes])
    assert np.array_equal(merged, image)
    print("   ✓ Split/merge round-trip")

    for bad in (np.zeros((4, 8, 3)), np.zeros((6, 6, 3)), np.zeros((1, 1, 3)),
                np.zeros((4, 4, 4)), np.zeros((15, 3))):
        with pytest.raises(InvalidDimensions):
            as_rgb_image(bad)
    with pytest.raises(InvalidDimensions):
        as_rgb_image(image, 4)
    print("   ✓ Non-square / non-power-of-two rejected")

    print("✅ Planes test passed")


def main():
    """Run all Checkpoint 4 tests."""
    print("\n" + "=" * 60)
    print("CHECKPOINT 4: COLOUR TRANSFORM")
    print("=" * 60 + "\n")

    tests = [
        ("Reference Colours", test_known_colors),
        ("Colour Round-Trip", test_color_roundtrip),
        ("Byte Clamping", test_byte_clamping),
        ("Planes", test_planes),
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
    print("CHECKPOINT 4 SUMMARY")
    print("=" * 60)

    all_passed = True
    for name, passed in results:
        status = "✅ PASS" if passed else "❌ FAIL"
        print(f"   {name}: {status}")
        all_passed = all_passed and passed

    return 0 if all_passed else 1


if __name__ == "__main__":
    sys.exit(main())
