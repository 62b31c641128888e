"""Streamlit deployment entry point: `streamlit run app.py` serves app/app.py from a source checkout."""
import runpy
import sys
from pathlib import Path

root = Path(__file__).resolve().parent
src_dir = root / "src"
if str(src_dir) not in sys.path:
    sys.path.insert(0, str(src_dir))

runpy.run_path(str(root / "app" / "app.py"), run_name="__main__")
