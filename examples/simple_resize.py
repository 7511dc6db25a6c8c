"""
Simple example of using image-resizer-core to generate variants of an image
"""

from pathlib import Path
from image_resizer import FormatSpec, ImageResizer, ImageResizerError


def main():
    # Replace with actual image path
    image_path = Path("example.jpg")

    if not image_path.exists():
        print(f"Error: {image_path} not found")
        print("Please provide a valid image path")
        return

    print(f"Resizing {image_path}...")
    print("-" * 60)

    resizer = ImageResizer(Path("variants"))
    resizer.use_format(FormatSpec("big", width=800, resize_mode="proportional"))
    resizer.use_format(FormatSpec("medium", width=300, resize_mode="proportional"))
    resizer.use_format(FormatSpec("small", 100, 100, "crop", "png"))

    # Don't upscale images smaller than a format
    resizer.skip_bigger_formats = True

    try:
        outputs = resizer.resize(image_path)
    except ImageResizerError as e:
        print(f"✗ Failed: {e}")
        return

    print("✓ Success!\n")
    for name, path in outputs.items():
        print(f"{name:<10} {path}")

    skipped = [f.name for f in resizer.formats if f.name not in outputs]
    if skipped:
        print(f"\nSkipped (source too small): {', '.join(skipped)}")

    # Remove the variants again
    # resizer.delete_generated_files()


if __name__ == "__main__":
    main()
