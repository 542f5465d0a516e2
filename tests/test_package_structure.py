"""Baseline tests ensuring the package layout and exports load correctly."""

import retrofile


def test_package_exports() -> None:
    for name in ("errors", "formats", "image", "loader", "system", "utils", "writer"):
        assert hasattr(retrofile, name), f"missing submodule: {name}"


def test_image_exports() -> None:
    from retrofile import image

    for name in ("Range", "Segment", "SegmentStore"):
        assert hasattr(image, name), f"image missing symbol: {name}"


def test_default_registry_covers_every_file_type() -> None:
    from retrofile.formats import FileType, default_registry

    registry = default_registry()
    assert [fmt.file_type for fmt in registry.input_formats()] == [FileType.HEX, FileType.BIN]
    assert [fmt.file_type for fmt in registry.output_formats()] == [FileType.PAP, FileType.WDC]
