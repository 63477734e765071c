#!/usr/bin/env python3
"""Configuration validation script."""

import sys
from pathlib import Path
from typing import Optional

# Add the project root to the Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from stateful_worker.config.loader import ConfigLoader
from stateful_worker.config.validation import ConfigValidator


def main(config_dir: Optional[Path] = None) -> int:
    """Validate worker.yaml merged over the defaults."""
    loader = ConfigLoader.create(config_dir)
    print(f"🔍 Validating {loader.config_dir / 'worker.yaml'}...")

    try:
        config = loader.merge_config()
    except Exception as e:
        print(f"❌ Could not load configuration: {e}")
        return 1

    errors = ConfigValidator.validate_config(config)
    if errors:
        print(f"❌ Found {len(errors)} validation errors:")
        for error in errors:
            print(f"  • {error.field}: {error.message} (value: {error.value!r})")
        return 1

    print("✅ Configuration is valid")
    for section, values in config.items():
        print(f"  [{section}]")
        for key, value in values.items():
            print(f"    {key} = {value}")
    return 0


if __name__ == "__main__":
    sys.exit(main(Path(sys.argv[1]) if len(sys.argv) > 1 else None))
