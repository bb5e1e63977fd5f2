# blind_cutter/__main__.py
# Package entrypoint so you can run:
#   python -m blind_cutter --help
# and it will delegate to the order JSON runner.
#
# Examples:
#   python -m blind_cutter --job order.json
#   python -m blind_cutter --job order.json --out out/ --png out/plan.png

from __future__ import annotations

from .run_json import main

if __name__ == "__main__":
    main()
