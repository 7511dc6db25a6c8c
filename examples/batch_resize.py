"""
Batch resize example - generate a format group for every image in a directory
"""

import sys
from pathlib import Path
from image_resizer import batch_resize, create_resizer, load_settings


def main():
    if len(sys.argv) < 3:
        print("Usage: python batch_resize.py <settings.yml> <directory>")
        return

    settings = load_settings(Path(sys.argv[1]))
    directory = Path(sys.argv[2])

    if not directory.is_dir():
        print(f"Error: {directory} is not a directory")
        return

    images = sorted(directory.glob("*.jpg")) + sorted(directory.glob("*.png"))
    print(f"Found {len(images)} images in {directory}")
    print(f"Writing variants to {settings.temp_directory}")
    print("-" * 60)

    resizer = create_resizer(settings)

    def on_progress(current, total, result):
        if result.success:
            print(f"[{current}/{total}] ✓ {result.source.name}: {', '.join(result.outputs)}")
        else:
            print(f"[{current}/{total}] ✗ {result.error}")

    results = batch_resize(resizer, images, progress_callback=on_progress)

    successful = [r for r in results if r.success]
    print("-" * 60)
    print(f"Resized {len(successful)}/{len(results)} images")
    print(f"Generated {len(resizer.generated_files)} files")


if __name__ == "__main__":
    main()
