import sys

from spectrogram_dsp.cli import main

sys.exit(main())
