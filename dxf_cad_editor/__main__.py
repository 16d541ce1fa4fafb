import sys

from dxf_cad_editor.cli import main

sys.exit(main())
