"""
Social Graph Runner
===================
Opens the demo network viewer from a source checkout.

Why is this file needed?
------------------------
1. The viewer can be tried without 'pip install -e .': the 'src' directory is
   put in front of 'sys.path' so 'socialgraph' resolves to the checkout.
2. On Windows the process gets its own AppUserModelID, so the taskbar shows
   the viewer's icon instead of the Python interpreter's.

Usage:
    $ python run.py [--debug] [--log-file viewer.log]
"""
import os
import sys

src_path: str = os.path.join(os.path.dirname(os.path.abspath(__file__)), 'src')
sys.path.insert(0, src_path)

try:
    import ctypes
    ctypes.windll.shell32.SetCurrentProcessExplicitAppUserModelID('SocialGraph.Viewer')
except (AttributeError, ImportError):
    # ctypes.windll only exists on Windows
    pass

from socialgraph.main import main

if __name__ == "__main__":
    main()
